from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass

from brewcalc.core.config import DEFAULTS, CalculationDefaults


@dataclass(frozen=True)
class WaterProfile:
    calcium: float = 0.0
    magnesium: float = 0.0
    sodium: float = 0.0
    chloride: float = 0.0
    sulfate: float = 0.0
    bicarbonate: float = 0.0

    @classmethod
    def from_mapping(cls, values: Mapping[str, float | None] | None) -> WaterProfile:
        """Build a profile from a partial mapping; missing ions are 0 mg/L.

        Accepts both the long ion names and the chemical shorthands used by
        water reports (``ca``, ``mg``, ``na``, ``cl``, ``so4``, ``hco3``).
        """
        if not values:
            return cls()
        resolved: dict[str, float] = {}
        for key, raw in values.items():
            field_name = _ION_ALIASES.get(key.lower())
            if field_name is None or raw is None:
                continue
            resolved[field_name] = max(0.0, float(raw))
        return cls(**resolved)


_ION_ALIASES = {
    "calcium": "calcium",
    "ca": "calcium",
    "magnesium": "magnesium",
    "mg": "magnesium",
    "sodium": "sodium",
    "na": "sodium",
    "chloride": "chloride",
    "cl": "chloride",
    "sulfate": "sulfate",
    "so4": "sulfate",
    "bicarbonate": "bicarbonate",
    "hco3": "bicarbonate",
}


@dataclass(frozen=True)
class SaltAddition:
    name: str
    amount: float
    unit: str
    rationale: str


@dataclass(frozen=True)
class WaterChemistryResult:
    batch_volume_liters: float
    source_profile: WaterProfile
    target_profile: WaterProfile
    projected_profile: WaterProfile
    additions: tuple[SaltAddition, ...]
    remaining_calcium_ppm: float
    notes: tuple[str, ...]


# ppm change from 1 g dissolved in 10 L.
_GYPSUM = {"calcium": 23.3, "sulfate": 55.8}
_CALCIUM_CHLORIDE = {"calcium": 27.2, "chloride": 48.2}
_EPSOM_SALT = {"magnesium": 9.9, "sulfate": 39.0}

_REFERENCE_VOLUME_LITERS = 10.0
_LACTIC_ACID_ML_PER_PPM_LITER = 0.002
_BICARBONATE_ACIDIFY_ABOVE_PPM = 60.0


def calculate_water_additions(
    source: WaterProfile | Mapping[str, float | None] | None,
    target: WaterProfile | Mapping[str, float | None] | None,
    batch_volume_liters: float,
    *,
    defaults: CalculationDefaults = DEFAULTS,
) -> WaterChemistryResult:
    """Propose brewing salts that move ``source`` water towards ``target``.

    This is a greedy pass in a fixed order (gypsum for sulfate, calcium
    chloride for chloride, Epsom salt for magnesium, then lactic acid for
    excess bicarbonate), not an equilibrium solver. Calcium is never dosed on
    its own; it only shrinks as a side effect of the calcium salts.
    """
    source_profile = source if isinstance(source, WaterProfile) else WaterProfile.from_mapping(source)
    target_profile = target if isinstance(target, WaterProfile) else WaterProfile.from_mapping(target)
    volume_factor = batch_volume_liters / _REFERENCE_VOLUME_LITERS
    threshold = defaults.min_reportable_amount

    needed_sulfate = max(0.0, target_profile.sulfate - source_profile.sulfate)
    needed_chloride = max(0.0, target_profile.chloride - source_profile.chloride)
    needed_magnesium = max(0.0, target_profile.magnesium - source_profile.magnesium)
    needed_calcium = max(0.0, target_profile.calcium - source_profile.calcium)

    projected = asdict(source_profile)
    additions: list[SaltAddition] = []

    if needed_sulfate > 0:
        grams_per_10l = needed_sulfate / _GYPSUM["sulfate"]
        total = grams_per_10l * volume_factor
        if total > threshold:
            additions.append(
                SaltAddition(
                    name="Gypsum (CaSO4)",
                    amount=round(total, 1),
                    unit="g",
                    rationale=f"Raises Sulfate by ~{needed_sulfate:.0f}ppm for bitterness/crispness.",
                )
            )
            _project(projected, _GYPSUM, grams_per_10l)
            needed_calcium = max(0.0, needed_calcium - grams_per_10l * _GYPSUM["calcium"])

    if needed_chloride > 0:
        grams_per_10l = needed_chloride / _CALCIUM_CHLORIDE["chloride"]
        total = grams_per_10l * volume_factor
        if total > threshold:
            additions.append(
                SaltAddition(
                    name="Calcium Chloride (CaCl2)",
                    amount=round(total, 1),
                    unit="g",
                    rationale=f"Raises Chloride by ~{needed_chloride:.0f}ppm for maltiness.",
                )
            )
            _project(projected, _CALCIUM_CHLORIDE, grams_per_10l)
            needed_calcium = max(0.0, needed_calcium - grams_per_10l * _CALCIUM_CHLORIDE["calcium"])

    if needed_magnesium > 0:
        grams_per_10l = needed_magnesium / _EPSOM_SALT["magnesium"]
        total = grams_per_10l * volume_factor
        if total > threshold:
            additions.append(
                SaltAddition(
                    name="Epsom Salt (MgSO4)",
                    amount=round(total, 1),
                    unit="g",
                    rationale=f"Raises Magnesium by ~{needed_magnesium:.0f}ppm.",
                )
            )
            _project(projected, _EPSOM_SALT, grams_per_10l)

    if (
        source_profile.bicarbonate > _BICARBONATE_ACIDIFY_ABOVE_PPM
        and target_profile.bicarbonate < source_profile.bicarbonate
    ):
        reduction = source_profile.bicarbonate - target_profile.bicarbonate
        acid_ml = reduction * _LACTIC_ACID_ML_PER_PPM_LITER * batch_volume_liters
        if acid_ml > threshold:
            additions.append(
                SaltAddition(
                    name="Lactic Acid 80%",
                    amount=round(acid_ml, 1),
                    unit="ml",
                    rationale=f"Reduces alkalinity by ~{reduction:.0f}ppm (pH adjustment).",
                )
            )
            projected["bicarbonate"] = target_profile.bicarbonate

    notes: list[str] = []
    if needed_calcium > 0:
        notes.append(f"Calcium remains ~{needed_calcium:.0f}ppm below target after salt additions.")
    if not additions:
        notes.append("Source water is already close to the target profile; no additions needed.")

    return WaterChemistryResult(
        batch_volume_liters=batch_volume_liters,
        source_profile=source_profile,
        target_profile=target_profile,
        projected_profile=WaterProfile(**{ion: round(value, 2) for ion, value in projected.items()}),
        additions=tuple(additions),
        remaining_calcium_ppm=round(needed_calcium, 2),
        notes=tuple(notes),
    )


def _project(projected: dict[str, float], contribution_ppm: dict[str, float], grams_per_10l: float) -> None:
    for ion, ppm in contribution_ppm.items():
        projected[ion] += grams_per_10l * ppm
