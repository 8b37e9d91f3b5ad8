"""
GST split calculation.

Pure functions, no database access. Bill creation calls calculate_gst()
and persists the rounded components as-is.

Rules:
    gst = base * rate / 100
    vendor and project state codes both present and different
        -> inter-state: IGST = gst
    otherwise (same state, or either code missing)
        -> intra-state: CGST = SGST = gst / 2

Every component is rounded half-up to paise (two decimals) and the total
is the sum of the rounded components, so the persisted figures always add
up exactly.

Example::

    >>> calculate_gst(Decimal('1000'), Decimal('18'), '27', '27')
    GSTBreakdown(taxable_amount=Decimal('1000.00'), cgst=Decimal('90.00'),
                 sgst=Decimal('90.00'), igst=Decimal('0.00'),
                 total_amount=Decimal('1180.00'))
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP


PAISA = Decimal('0.01')
ZERO = Decimal('0.00')


@dataclass(frozen=True)
class GSTBreakdown:
    taxable_amount: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    total_amount: Decimal

    @property
    def is_inter_state(self) -> bool:
        return self.igst > ZERO

    def as_dict(self) -> dict:
        return {
            'taxable_amount': self.taxable_amount,
            'cgst': self.cgst,
            'sgst': self.sgst,
            'igst': self.igst,
            'total_amount': self.total_amount,
        }


def to_decimal(value) -> Decimal:
    """Convert int/float/str/Decimal to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> Decimal:
    return to_decimal(value).quantize(PAISA, rounding=ROUND_HALF_UP)


def _clean_state_code(code):
    if code is None:
        return ''
    return str(code).strip()


def is_inter_state(vendor_state_code, project_state_code) -> bool:
    """Inter-state only when both codes are known and differ."""
    vendor = _clean_state_code(vendor_state_code)
    project = _clean_state_code(project_state_code)
    return bool(vendor) and bool(project) and vendor != project


def calculate_gst(base_amount, gst_rate, vendor_state_code=None, project_state_code=None) -> GSTBreakdown:
    """
    Split GST on ``base_amount`` into CGST/SGST or IGST.

    Args:
        base_amount: Taxable amount (Decimal, str, int or float)
        gst_rate: GST rate in percent, e.g. 18
        vendor_state_code: Vendor's GST state code, may be blank
        project_state_code: Project site's GST state code, may be blank

    Returns:
        GSTBreakdown with every field rounded to two decimals

    Raises:
        ValueError: If the amount or rate is negative
    """
    base = to_decimal(base_amount)
    rate = to_decimal(gst_rate)

    if base < 0:
        raise ValueError("Taxable amount cannot be negative")
    if rate < 0:
        raise ValueError("GST rate cannot be negative")

    gst = base * rate / Decimal(100)

    if is_inter_state(vendor_state_code, project_state_code):
        cgst = sgst = ZERO
        igst = round_money(gst)
    else:
        cgst = sgst = round_money(gst / 2)
        igst = ZERO

    taxable = round_money(base)
    total = taxable + cgst + sgst + igst

    return GSTBreakdown(
        taxable_amount=taxable,
        cgst=cgst,
        sgst=sgst,
        igst=igst,
        total_amount=total,
    )
