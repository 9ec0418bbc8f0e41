"""Input checks shared by the domain services.

Money is brought to cents and quantities to thousandths before any check or
comparison, matching the scale the store keeps.
"""

from decimal import Decimal
from enum import Enum
from typing import Callable, Optional, TypeVar, Union

from woodshop.domain import errors
from woodshop.utils.amount_parser import Number, money_round, parse_amount, quantity_round

E = TypeVar("E", bound=Enum)

Rounding = Optional[Callable[[Decimal], Decimal]]

MONEY = money_round
QUANTITY = quantity_round


def to_decimal(field_name: str, value: Number, rounding: Rounding = None) -> Decimal:
    """Convert a numeric input, reporting unparsable values as ValidationError."""
    try:
        amount = parse_amount(value)
    except ValueError as e:
        raise errors.ValidationError(f"{field_name}: {e}") from e
    return rounding(amount) if rounding else amount


def non_negative(field_name: str, value: Number, rounding: Rounding = None) -> Decimal:
    amount = to_decimal(field_name, value, rounding)
    if amount < 0:
        raise errors.ValidationError(errors.negative_value(field_name, amount))
    return amount


def positive(field_name: str, value: Number, rounding: Rounding = None) -> Decimal:
    amount = to_decimal(field_name, value, rounding)
    if amount <= 0:
        raise errors.ValidationError(errors.non_positive_quantity(field_name, amount))
    return amount


def optional_non_negative(
    field_name: str, value: Optional[Number], rounding: Rounding = None
) -> Optional[Decimal]:
    if value is None:
        return None
    return non_negative(field_name, value, rounding)


def whole_number(field_name: str, value, minimum: int) -> int:
    """Return ``value`` as an int, rejecting fractions and values below ``minimum``."""
    amount = to_decimal(field_name, value)
    if amount != amount.to_integral_value() or amount < minimum:
        raise errors.ValidationError(
            f"{field_name} must be a whole number of at least {minimum} (got {value})"
        )
    return int(amount)


def required_name(entity: str, name: Optional[str]) -> str:
    """Return the stripped name, rejecting blank ones."""
    if name is None or not name.strip():
        raise errors.ValidationError(errors.blank_name(entity))
    return name.strip()


def choice(enum_cls: type[E], value: Union[E, str]) -> E:
    """Coerce a value to a member of ``enum_cls``."""
    try:
        return enum_cls(value)
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_cls)
        raise errors.ValidationError(
            f"Invalid {enum_cls.__name__} '{value}'. Allowed: {allowed}"
        ) from e
