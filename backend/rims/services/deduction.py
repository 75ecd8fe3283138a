"""Deduction Calculator - true ingredient consumption per unit sold.

A recipe states the nominal amount of an ingredient that ends up in one
unit of a menu item. Prep waste is expressed as a yield factor (the inverse
of the usable fraction), and the amount removed from stock is:

    actual_deduction = quantity_required / yield_factor
"""

import math

from rims.core.exceptions import ValidationError

# Display precision for projections (computation keeps full precision)
DEDUCTION_PRECISION = 4
CURRENCY_PRECISION = 2


def actual_deduction(quantity_required: float, yield_factor: float) -> float:
    """Stock removed for one unit of a menu item.

    Raises ValidationError for a zero, negative or non-finite yield factor and
    for a negative or non-finite quantity, instead of returning inf/negative.
    """
    if not math.isfinite(yield_factor) or yield_factor <= 0:
        raise ValidationError(f"Yield factor must be a positive number, got {yield_factor}")
    if not math.isfinite(quantity_required) or quantity_required < 0:
        raise ValidationError(f"Quantity required must be non-negative, got {quantity_required}")
    return quantity_required / yield_factor


def total_deduction(quantity_required: float, yield_factor: float, units: int) -> float:
    """Stock removed for ``units`` of a menu item."""
    return actual_deduction(quantity_required, yield_factor) * units
