from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Largest amount any money field may hold: 15 integer digits, 4 decimal places
MONEY_INTEGER_DIGITS = 15
MONEY_DECIMAL_PLACES = 4
# Upper bound on ordered quantity, keeps line amounts inside the money bounds
MAX_QUANTITY = 1_000_000_000


class ApiModel(BaseModel):
    """Base for every wire model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class PatchModel(ApiModel):
    def changes(self) -> Dict[str, Any]:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


def within_money_bounds(amount: Decimal) -> bool:
    if not amount.is_finite():
        return False
    integer_digits = max(amount.adjusted() + 1, 0)
    decimal_places = max(-amount.as_tuple().exponent, 0)
    return integer_digits <= MONEY_INTEGER_DIGITS and decimal_places <= MONEY_DECIMAL_PLACES


def money_str(v):
    """Validate a decimal amount and keep it as the submitted text."""
    if v is None:
        return None
    if isinstance(v, bool):
        raise ValueError("must be a decimal amount")
    text = str(v).strip()
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError("must be a decimal amount")
    if not amount.is_finite():
        raise ValueError("must be a decimal amount")
    if amount < 0:
        raise ValueError("must not be negative")
    if not within_money_bounds(amount):
        raise ValueError(
            f"must have at most {MONEY_INTEGER_DIGITS} digits before "
            f"and {MONEY_DECIMAL_PLACES} after the decimal point"
        )
    return text


def empty_str_to_none(v):
    if v is None:
        return None
    v = str(v).strip()
    return v or None


def reject_null(v):
    if v is None:
        raise ValueError("may not be null")
    return v
