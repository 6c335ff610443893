from dataclasses import dataclass, replace

from models import KG_TO_LB, WeighingCategory

from .aggregation import Report

POUND_NAMES = {"Pounds (lb)", "lb"}
KILOGRAM_NAMES = {"Kilograms (kg)", "kg"}


@dataclass(frozen=True)
class Unit:
    label: str
    # Kilograms in one of this unit
    kilograms: float = 1.0
    multiplier: float | None = None

    def convert(self, kg: float) -> float:
        if self.multiplier is not None:
            return round(kg * self.multiplier, 2)
        return round(kg / self.kilograms, 2)


KILOGRAMS = Unit("kg")
POUNDS = Unit("lb", multiplier=KG_TO_LB)


def resolve_unit(organization_id: int, name: str | None) -> Unit:
    """Pounds, one of the organization's weighing categories, or kilograms."""
    if not name or name in KILOGRAM_NAMES:
        return KILOGRAMS
    if name in POUND_NAMES:
        return POUNDS

    weighing = WeighingCategory.get_by_name(organization_id, name)
    if weighing is not None and weighing.kilograms > 0:
        return Unit(weighing.category, kilograms=weighing.kilograms)
    return KILOGRAMS


def convert_report(report: Report, unit: Unit) -> Report:
    """Apply ``unit`` to every weight cell. Aggregation stays in kilograms
    and this is only ever done on the way out."""
    if not report.weight_columns:
        return report

    def convert_row(row):
        return {
            k: unit.convert(v) if k in report.weight_columns and isinstance(v, int | float) else v
            for k, v in row.items()
        }

    extras = {**report.extras, "unit": unit.label}
    if "donor_totals" in extras:
        extras["donor_totals"] = {
            donor: {**totals, "weight": unit.convert(totals["weight"])}
            for donor, totals in extras["donor_totals"].items()
        }

    return replace(
        report,
        rows=[convert_row(r) for r in report.rows],
        totals=convert_row(report.totals) if report.totals is not None else None,
        grand_total=unit.convert(report.grand_total),
        extras=extras,
    )
