"""Arithmetic operations with input validation.

Every operation raises InvalidInputError for bad input; the API maps it to 400.
"""

import math

# 171! no longer fits in a double
MAX_FACTORIAL = 170


class InvalidInputError(ValueError):
    """Input rejected by a calculator or utility function."""


def is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value) -> bool:
    return is_number(value) and float(value).is_integer()


def _require_numbers(*values) -> None:
    if not all(is_number(v) for v in values):
        raise InvalidInputError("Both arguments must be numbers")


def add(a, b):
    _require_numbers(a, b)
    return a + b


def subtract(a, b):
    _require_numbers(a, b)
    return a - b


def multiply(a, b):
    _require_numbers(a, b)
    return a * b


def divide(a, b):
    _require_numbers(a, b)
    if b == 0:
        raise InvalidInputError("Division by zero is not allowed")
    return a / b


def power(base, exponent):
    _require_numbers(base, exponent)
    try:
        return math.pow(base, exponent)
    except (OverflowError, ValueError) as e:
        raise InvalidInputError(f"Cannot raise {base} to {exponent}: {e}") from e


def sqrt(number):
    if not is_number(number):
        raise InvalidInputError("Argument must be a number")
    if number < 0:
        raise InvalidInputError("Cannot calculate square root of negative number")
    return math.sqrt(number)


def factorial(n) -> int:
    if not is_integer(n):
        raise InvalidInputError("Argument must be an integer")
    if n < 0:
        raise InvalidInputError("Factorial is not defined for negative numbers")
    if n > MAX_FACTORIAL:
        raise InvalidInputError(f"Argument must not exceed {MAX_FACTORIAL}")
    return math.factorial(int(n))
