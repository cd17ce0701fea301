from typing import Any, Literal

from pydantic import BaseModel, Field


class BeerXMLExportRequest(BaseModel):
    recipe: dict[str, Any] = Field(default_factory=dict)
    unit_system: Literal["metric", "imperial"] = "metric"
