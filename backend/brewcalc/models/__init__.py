from brewcalc.models.batch import Batch, FermentationReading

__all__ = [
    "Batch",
    "FermentationReading",
]
