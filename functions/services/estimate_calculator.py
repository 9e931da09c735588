"""
Estimate Calculator for RenoQuote.

Turns a template id plus raw form data into a structured Estimate:
materials list, material cost, labor hours, transportation and disposal.

Architecture:
- One handler per template (tagged dispatch on template id).
- Handlers read their template's `pricing` block and the visible form data
  (fields hidden by an unchecked `dependsOn` parent are removed first).
- Numeric input is coerced (missing/invalid/negative -> 0); categorical
  input is looked up in pricing tables.

Rounding:
- material cost, transportation, disposal: nearest integer, .5 up
- labor hours: 1 decimal
- total: sum of the rounded currency components (labor excluded; it needs
  a contractor rate)

Failure policy:
- Unknown template, missing pricing key, a required selection not yet made,
  a non-scalar selection, or a non-finite result all degrade to the zero
  estimate (Estimate.zero) after logging.

Every call emits exactly one ESTIMATE_CALCULATED activity event, after the
estimate value is fully built.
"""

import asyncio
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import structlog

from config.errors import ErrorCode, PricingDataError, TemplateNotFoundError, ValidationError
from config.settings import settings
from models.activity import ActivityAction
from models.estimate import Estimate, MaterialLineItem
from models.template import Template
from services.activity_sink import ActivitySink, LoggingActivitySink, summarize_form_data
from services.template_registry import TemplateRegistry, file_field_ids, registry, visible_form_data
from utils.numbers import as_list, is_truthy, round_half_up, round_hours, to_number

logger = structlog.get_logger(__name__)


# =============================================================================
# Calculation accumulator
# =============================================================================


@dataclass
class _Calculation:
    """Mutable working state of one handler run; frozen into an Estimate afterwards."""

    materials: List[MaterialLineItem] = field(default_factory=list)
    labor_hours: float = 0.0
    transportation: float = 0.0
    disposal: float = 0.0

    def add(self, line: MaterialLineItem) -> None:
        self.materials.append(line)

    @property
    def material_cost(self) -> float:
        return sum(line.total_price for line in self.materials)


Handler = Callable[[Template, Dict[str, Any]], _Calculation]


# =============================================================================
# Lookup helpers
# =============================================================================


def _lookup(template: Template, table_path: str, form: Dict[str, Any], field_id: str,
            required: bool = True, default: Any = None) -> Any:
    """Resolve the pricing entry for a categorical field's selected value.

    Raises:
        ValidationError: If a required selection is missing (incomplete form).
        PricingDataError: If the selected value has no pricing entry.
    """
    key = form.get(field_id)
    if key is None or key == "":
        if required:
            raise ValidationError(
                message=f"No selection for '{field_id}'",
                field=field_id,
                code=ErrorCode.MISSING_FIELD,
            )
        return default

    if not isinstance(key, (str, int, float, bool)):
        raise ValidationError(
            message=f"Invalid selection for '{field_id}'",
            field=field_id,
            code=ErrorCode.INVALID_FIELD,
        )

    table = template.pricing_table(table_path)
    if not isinstance(table, dict) or key not in table:
        raise PricingDataError(template.id, table_path, key)
    return table[key]


def _dimension(form: Dict[str, Any], field_id: str) -> float:
    """Non-negative numeric field value."""
    return max(to_number(form.get(field_id)), 0.0)


# =============================================================================
# Area-based templates
# =============================================================================


def _deck_refresh(template: Template, form: Dict[str, Any]) -> _Calculation:
    pricing = template.pricing
    labor = pricing["labor_hours"]
    supplies = pricing["materials"]["supplies"]
    services = pricing["additional_services"]
    calc = _Calculation(transportation=pricing["transportation"], disposal=pricing["disposal"])

    area = _dimension(form, "deckLength") * _dimension(form, "deckWidth")
    condition = _lookup(template, "labor_hours.conditions", form, "deckCondition")
    calc.labor_hours = labor["base"] + area * labor["per_sq_ft"] * condition

    stain = _lookup(template, "materials.stain", form, "stainType")
    calc.add(MaterialLineItem.per_unit(stain["description"], area, "sq ft", stain["price_per_sq_ft"]))

    sandpaper = supplies["sandpaper"]
    calc.add(MaterialLineItem.per_unit(sandpaper["description"], area, "sq ft", sandpaper["price_per_sq_ft"]))
    calc.add(MaterialLineItem.flat(supplies["brushes"]["description"], supplies["brushes"]["price"], "1 set"))
    calc.add(MaterialLineItem.flat(supplies["cleaner"]["description"], supplies["cleaner"]["price"]))

    # railingLength is only present when railingRefresh is checked
    railing_length = _dimension(form, "railingLength")
    if railing_length > 0:
        railing = services["railing_refresh"]
        calc.labor_hours += railing["labor_hours"]
        calc.add(MaterialLineItem.per_unit(
            "Railing refresh materials", railing_length, "ft", railing["material_cost_per_ft"]
        ))

    if is_truthy(form.get("pressureWashing")):
        washing = services["pressure_washing"]
        calc.labor_hours += washing["labor_hours"]
        calc.add(MaterialLineItem.flat("Pressure washing supplies", washing["material_cost"]))

    return calc


def _garden_bed(template: Template, form: Dict[str, Any]) -> _Calculation:
    pricing = template.pricing
    labor = pricing["labor_hours"]
    materials = pricing["materials"]
    addons = materials["addons"]
    calc = _Calculation(transportation=pricing["transportation"], disposal=pricing["disposal"])

    area = _dimension(form, "bedLength") * _dimension(form, "bedWidth")
    site = _lookup(template, "labor_hours.site_condition", form, "siteCondition")
    calc.labor_hours = labor["base"] + area * labor["per_sq_ft"] * site

    for field_id, table_path in (
        ("bedStyle", "materials.bed_style"),
        ("soilPrep", "materials.soil"),
        ("plantDensity", "materials.plants"),
    ):
        entry = _lookup(template, table_path, form, field_id)
        calc.add(MaterialLineItem.per_unit(entry["description"], area, "sq ft", entry["price_per_sq_ft"]))

    fertilizer = materials["supplies"]["fertilizer"]
    calc.add(MaterialLineItem.flat(fertilizer["description"], fertilizer["price"]))

    if is_truthy(form.get("mulch")):
        mulch = addons["mulch"]
        calc.add(MaterialLineItem.per_unit(mulch["description"], area, "sq ft", mulch["price_per_sq_ft"]))

    edging_length = _dimension(form, "edgingLength")
    if edging_length > 0:
        edging = addons["edging"]
        calc.labor_hours += edging_length * labor["edging_per_ft"]
        calc.add(MaterialLineItem.per_unit(edging["description"], edging_length, "ft", edging["price_per_ft"]))

    if is_truthy(form.get("irrigation")):
        calc.labor_hours += labor["irrigation"]
        calc.add(MaterialLineItem.flat(addons["irrigation"]["description"], addons["irrigation"]["price"]))

    return calc


# =============================================================================
# Count/size-based templates
# =============================================================================


def _firepit(template: Template, form: Dict[str, Any]) -> _Calculation:
    pricing = template.pricing
    labor = pricing["labor_hours"]
    addons = pricing["materials"]["addons"]
    calc = _Calculation(transportation=pricing["transportation"], disposal=pricing["disposal"])

    seating_diameter = _dimension(form, "seatingArea")
    seating_sq_ft = math.pi * (seating_diameter / 2) ** 2
    calc.labor_hours = labor["base"] + seating_sq_ft / 10 * labor["seating_prep"]

    firepit = _lookup(template, "materials.firepit", form, "firepitType")
    size_multiplier = _lookup(template, "size_multipliers", form, "firepitSize", required=False, default=1.0)
    calc.add(MaterialLineItem.flat(firepit["description"], firepit["price"] * size_multiplier))

    seating = _lookup(template, "materials.seating", form, "seatingType")
    calc.add(MaterialLineItem.flat(seating["description"], seating["price"]))

    # Add-ons apply independently and cumulatively
    for addon in ("landscaping", "lighting"):
        if is_truthy(form.get(addon)):
            calc.labor_hours += labor[addon]
            calc.add(MaterialLineItem.flat(addons[addon]["description"], addons[addon]["price"]))

    fuel = _lookup(template, "materials.fuel", form, "fuelType", required=False)
    if fuel:
        calc.labor_hours += fuel["labor_hours"]
        if fuel["price"] > 0:
            calc.add(MaterialLineItem.flat(fuel["description"], fuel["price"]))

    return calc


# =============================================================================
# Rate-based templates
# =============================================================================


def _surcharges(template: Template, table_path: str, selections: Any) -> List[Any]:
    """Entries for each selected checkbox-group value; unknown values contribute nothing."""
    table = template.pricing_table(table_path) or {}
    entries = []
    for value in as_list(selections):
        if isinstance(value, (str, int, float, bool)) and value in table:
            entries.append(table[value])
        else:
            logger.warning("surcharge_key_unknown", template_id=template.id, table=table_path, value=value)
    return entries


def _lawn_mowing(template: Template, form: Dict[str, Any]) -> _Calculation:
    pricing = template.pricing
    labor = pricing["labor_hours"]
    fuel = pricing["materials"]["fuel"]
    calc = _Calculation(transportation=pricing["transportation"], disposal=pricing["disposal"])

    area = _dimension(form, "lawnLength") * _dimension(form, "lawnWidth")
    grass = _lookup(template, "labor_hours.grass_height_multiplier", form, "grassHeight")
    terrain = _lookup(template, "labor_hours.terrain_multiplier", form, "terrain")
    calc.labor_hours = labor["base"] + area * labor["per_sq_ft"] * grass * terrain

    for extra_hours in _surcharges(template, "labor_hours.obstacles", form.get("obstacles")):
        calc.labor_hours += extra_hours

    calc.add(MaterialLineItem.flat(fuel["description"], fuel["price"]))

    if is_truthy(form.get("bagClippings")):
        calc.disposal = pricing["clipping_disposal"]

    return calc


def _pressure_washing(template: Template, form: Dict[str, Any]) -> _Calculation:
    pricing = template.pricing
    labor = pricing["labor_hours"]
    materials = pricing["materials"]
    calc = _Calculation(transportation=pricing["transportation"], disposal=pricing["disposal"])

    area = _dimension(form, "surfaceLength") * _dimension(form, "surfaceWidth")
    surface = _lookup(template, "materials.surface", form, "surfaceType")
    dirt = _lookup(template, "multipliers.dirt_level", form, "dirtLevel")
    access = _lookup(template, "multipliers.access", form, "accessDifficulty")

    # Multipliers compose multiplicatively
    factor = dirt * access
    calc.labor_hours = labor["base"] + area * labor["per_sq_ft"] * factor
    calc.add(MaterialLineItem.per_unit(
        surface["description"], area, "sq ft", surface["price_per_sq_ft"] * factor
    ))
    calc.add(MaterialLineItem.flat(materials["equipment"]["description"], materials["equipment"]["price"]))

    for service in _surcharges(template, "materials.special_services", form.get("specialServices")):
        calc.add(MaterialLineItem.flat(service["description"], service["price"]))

    return calc


HANDLERS: Dict[str, Handler] = {
    "deck-refresh": _deck_refresh,
    "garden-bed": _garden_bed,
    "firepit": _firepit,
    "lawn-mowing": _lawn_mowing,
    "pressure-washing": _pressure_washing,
}


# =============================================================================
# Calculator
# =============================================================================


def _build_estimate(template: Template, calc: _Calculation) -> Estimate:
    """Round the working state and freeze it into an Estimate."""
    if not (math.isfinite(calc.material_cost) and math.isfinite(calc.labor_hours)):
        raise ValidationError(
            message=f"Estimate for '{template.id}' is out of range",
            code=ErrorCode.INVALID_FIELD,
        )

    material_cost = round_half_up(calc.material_cost)
    transportation = round_half_up(calc.transportation)
    disposal = round_half_up(calc.disposal)
    labor_hours = round_hours(max(calc.labor_hours, 0.0))

    return Estimate(
        template_id=template.id,
        materials=list(calc.materials),
        material_cost=material_cost,
        labor_hours=labor_hours,
        transportation=transportation,
        disposal=disposal,
        complexity=template.complexity,
        estimated_time=template.estimated_time,
        breakdown={
            "materialCost": material_cost,
            "transportation": transportation,
            "disposal": disposal,
            "laborHours": labor_hours,
        },
        total=material_cost + transportation + disposal,
    )


class EstimateCalculator:
    """Template-driven estimate calculation with an injected activity sink."""

    def __init__(
        self,
        activity_sink: Optional[ActivitySink] = None,
        template_registry: Optional[TemplateRegistry] = None,
    ):
        self.activity_sink = activity_sink or LoggingActivitySink()
        self.registry = template_registry or registry

    def calculate(self, template_id: str, form_data: Optional[Dict[str, Any]],
                  user_id: Optional[str] = None) -> Estimate:
        """Calculate the estimate for a template and form data.

        Never raises for bad input or data defects; returns Estimate.zero
        instead.
        """
        form_data = form_data or {}
        template: Optional[Template] = None

        try:
            template = self.registry.get_template(template_id)
            handler = HANDLERS.get(template_id)
            if handler is None:
                raise TemplateNotFoundError(template_id)
            calc = handler(template, visible_form_data(template, form_data))
            estimate = _build_estimate(template, calc)
        except TemplateNotFoundError as e:
            logger.error("estimate_template_not_found", template_id=template_id, error=e.message)
            estimate = Estimate.zero(template_id)
        except PricingDataError as e:
            logger.error(
                "estimate_pricing_key_missing",
                template_id=template_id,
                table=e.table,
                key=e.key,
            )
            estimate = Estimate.zero(template_id)
        except ValidationError as e:
            if e.field is None:
                logger.error("estimate_out_of_range", template_id=template_id, error=e.message)
            else:
                logger.warning("estimate_form_incomplete", template_id=template_id, field=e.field, code=e.code)
            estimate = Estimate.zero(template_id)

        self._emit(template, template_id, form_data, user_id, estimate)
        return estimate

    def _emit(self, template: Optional[Template], template_id: str, form_data: Dict[str, Any],
              user_id: Optional[str], estimate: Estimate) -> None:
        file_fields = file_field_ids(template) if template else []
        self.activity_sink.emit(
            ActivityAction.ESTIMATE_CALCULATED,
            {
                "templateId": template_id,
                "formData": summarize_form_data(form_data, file_fields),
                "userId": user_id or "anonymous",
                "summary": {
                    "total": estimate.total,
                    "materialCost": estimate.material_cost,
                    "laborHours": estimate.labor_hours,
                },
            },
            user_id=user_id,
        )

    async def calculate_delayed(self, template_id: str, form_data: Optional[Dict[str, Any]],
                                user_id: Optional[str] = None,
                                delay_seconds: Optional[float] = None) -> Estimate:
        """Calculate after the simulated server round trip."""
        delay = settings.estimate_latency_seconds if delay_seconds is None else delay_seconds
        if delay > 0:
            await asyncio.sleep(delay)
        return self.calculate(template_id, form_data, user_id)


def calculate_estimate(template_id: str, form_data: Optional[Dict[str, Any]], user_id: Optional[str] = None,
                       activity_sink: Optional[ActivitySink] = None) -> Estimate:
    """Calculate a project estimate. See EstimateCalculator.calculate."""
    return EstimateCalculator(activity_sink=activity_sink).calculate(template_id, form_data, user_id)
