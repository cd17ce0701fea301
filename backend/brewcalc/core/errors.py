class BrewCalcError(Exception):
    """Base class for errors raised by the calculation layer."""


class BeerXMLExportError(BrewCalcError):
    """Raised when a recipe cannot be serialized into a valid BeerXML file."""
