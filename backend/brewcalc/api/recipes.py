import re

from fastapi import APIRouter, HTTPException, Response, status

from brewcalc.core.errors import BeerXMLExportError
from brewcalc.schemas.recipe import BeerXMLExportRequest
from brewcalc.services.beerxml import export_to_beerxml
from brewcalc.services.recipe_normalizer import normalize_recipe

router = APIRouter(prefix="/recipes", tags=["recipes"])

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9_-]+")


def _export_filename(recipe_name: str) -> str:
    slug = _UNSAFE_FILENAME.sub("_", recipe_name).strip("_") or "recipe"
    return f"{slug}.xml"


@router.post("/export/beerxml")
def export_recipe_beerxml(payload: BeerXMLExportRequest) -> Response:
    recipe = normalize_recipe(payload.recipe)
    try:
        document = export_to_beerxml(recipe, payload.unit_system)
    except BeerXMLExportError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    return Response(
        content=document,
        media_type="application/xml",
        headers={"Content-Disposition": f'attachment; filename="{_export_filename(recipe.name)}"'},
    )
