"""Array, string, number and date helpers."""

import math
import re
from datetime import date

from .calculator import InvalidInputError, is_integer, is_number

# F(1477) no longer fits in a double
MAX_FIBONACCI = 1476


# --- Arrays ---


def array_sum(arr) -> float:
    if not isinstance(arr, list):
        raise InvalidInputError("Input must be an array")
    if not all(is_number(n) for n in arr):
        raise InvalidInputError("All array elements must be numbers")
    return sum(arr)


def _require_non_empty(arr) -> None:
    if not isinstance(arr, list) or not arr:
        raise InvalidInputError("Input must be a non-empty array")


def array_average(arr) -> float:
    _require_non_empty(arr)
    return array_sum(arr) / len(arr)


def array_max(arr):
    _require_non_empty(arr)
    array_sum(arr)  # element check
    return max(arr)


def array_min(arr):
    _require_non_empty(arr)
    array_sum(arr)
    return min(arr)


# --- Strings ---


def _require_string(value) -> None:
    if not isinstance(value, str):
        raise InvalidInputError("Input must be a string")


def capitalize(text: str) -> str:
    _require_string(text)
    return text[:1].upper() + text[1:].lower()


def reverse_string(text: str) -> str:
    _require_string(text)
    return text[::-1]


def is_palindrome(text: str) -> bool:
    _require_string(text)
    cleaned = re.sub(r"[^a-z0-9]", "", text.lower())
    return cleaned == cleaned[::-1]


# --- Numbers ---


def is_prime(number) -> bool:
    if not is_integer(number):
        raise InvalidInputError("Input must be an integer")
    n = int(number)
    if n < 2:
        return False
    for i in range(2, math.isqrt(n) + 1):
        if n % i == 0:
            return False
    return True


def fibonacci(n) -> int:
    if not is_integer(n) or n < 0:
        raise InvalidInputError("Input must be a non-negative integer")
    if n > MAX_FIBONACCI:
        raise InvalidInputError(f"Input must not exceed {MAX_FIBONACCI}")
    a, b = 0, 1
    for _ in range(int(n)):
        a, b = b, a + b
    return a


# --- Dates ---


def format_date(value: date, fmt: str = "YYYY-MM-DD") -> str:
    """Format with YYYY / MM / DD placeholders."""
    if not isinstance(value, date):
        raise InvalidInputError("Input must be a date")
    return (
        fmt.replace("YYYY", f"{value.year:04d}")
        .replace("MM", f"{value.month:02d}")
        .replace("DD", f"{value.day:02d}")
    )


def days_between(first: date, second: date) -> int:
    """Whole days between two dates, rounded up, order-independent."""
    if not isinstance(first, date) or not isinstance(second, date):
        raise InvalidInputError("Both inputs must be dates")
    seconds = abs((second - first).total_seconds())
    return math.ceil(seconds / 86400)
