"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from fulfillment.domain.exceptions import ValidationError

QUANTITY_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest value a NUMERIC(10, 2) column holds.
MAX_QUANTITY = Decimal("99999999.99")


def to_decimal(value: str | int | Decimal) -> Decimal:
    """Coerce *value* to a two-place Decimal without rounding.

    Floats are refused outright: ``0.1`` has no exact binary form and
    quantities must compare exactly.
    """
    if isinstance(value, float):
        raise ValidationError(f"Quantity must be given as a decimal string, got {value!r}")
    try:
        raw = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid quantity: {value!r}") from exc
    if not raw.is_finite():
        raise ValidationError(f"Invalid quantity: {value!r}")
    if abs(raw) > MAX_QUANTITY:
        raise ValidationError(f"Quantity {value} exceeds the maximum of {MAX_QUANTITY}")
    quantized = raw.quantize(QUANTITY_PLACES)
    if quantized != raw:
        raise ValidationError(
            f"Quantity {value} has more than two decimal places"
        )
    return quantized


@dataclass(frozen=True)
class Quantity:
    """A strictly positive amount with two-decimal precision.

    Used for ordered quantities and shipment quantities.  Running totals
    (``shipped_quantity``) may legitimately be zero, so they are kept as
    plain Decimals on the line item.
    """

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise ValidationError(
                f"Quantity must be a Decimal, got {type(self.value).__name__}"
            )
        if self.value <= ZERO:
            raise ValidationError("Quantity must be positive")
        if self.value > MAX_QUANTITY:
            raise ValidationError(
                f"Quantity {self.value} exceeds the maximum of {MAX_QUANTITY}"
            )
        if self.value.quantize(QUANTITY_PLACES) != self.value:
            raise ValidationError(
                f"Quantity {self.value} has more than two decimal places"
            )

    def __str__(self) -> str:
        return f"{self.value:.2f}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | int | Decimal) -> Quantity:
        """Convenient factory that coerces to Decimal safely."""
        return Quantity(to_decimal(amount))
