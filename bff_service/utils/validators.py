"""
Validation utilities for inbound requests

Rules run synchronously before any backend call. The first failing rule wins.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional


# Any identifier of this many digits fits a signed 64-bit integer
MAX_ID_DIGITS = 18

PRODUCT_STATUSES = ("PENDING", "APPROVED", "REJECTED")
REVIEW_STATUSES = ("APPROVED", "REJECTED")


@dataclass(frozen=True)
class ValidationRule:
    """A single field check and the message reported when it fails"""
    field: str
    predicate: Callable[[Any], bool]
    message: str


def first_failure(values: Mapping[str, Any], rules: Iterable[ValidationRule]) -> Optional[str]:
    """
    Evaluate rules in order against values

    Returns:
        Message of the first failing rule, or None when every rule passes
    """
    for rule in rules:
        if not rule.predicate(values.get(rule.field)):
            return rule.message
    return None


# Predicates

def is_present(value: Any) -> bool:
    """Value was supplied and is not empty"""
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return True


def is_not_blank(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def has_trimmed_length(min_length: int, max_length: int) -> Callable[[Any], bool]:
    """Build a predicate checking a string's stripped length"""
    def predicate(value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return min_length <= len(value.strip()) <= max_length
    return predicate


def is_positive_integer_string(value: Any) -> bool:
    """Identifier made only of digits with a value above zero"""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value > 0
    if not isinstance(value, str):
        return False
    stripped = value.strip()
    if len(stripped) > MAX_ID_DIGITS or not (stripped.isascii() and stripped.isdigit()):
        return False
    return int(stripped) > 0


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_non_negative_number(value: Any) -> bool:
    return is_number(value) and value >= 0


def is_positive_number(value: Any) -> bool:
    return is_number(value) and value > 0


def is_one_of(choices: Iterable[str]) -> Callable[[Any], bool]:
    """Build a case-insensitive membership predicate"""
    allowed = frozenset(choice.upper() for choice in choices)

    def predicate(value: Any) -> bool:
        return isinstance(value, str) and value.upper() in allowed
    return predicate


# Shared field predicates

is_valid_product_id = is_positive_integer_string
is_valid_cart_id = is_positive_integer_string
is_valid_customer_id = has_trimmed_length(1, 50)
is_valid_sku_code = has_trimmed_length(2, 50)
is_valid_search_value = has_trimmed_length(2, 100)
is_valid_category_name = has_trimmed_length(2, 100)


def validation_message(field: str, requirement: str) -> str:
    """Field-specific message, e.g. 'Customer ID must be between 1 and 50 characters'"""
    return f"{field} {requirement}"
