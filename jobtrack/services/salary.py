"""
JobTrack - Salary string helpers.

Salaries are stored as free text ("USD 90000-120000", "EUR 75000") so that
imported and hand-typed values survive untouched. These helpers split such
strings into currency and numbers for the edit form, and format the form
fields back into the stored text.
"""
import re
from typing import List, NamedTuple, Optional

CURRENCY_OPTIONS = [
    "USD", "EUR", "GBP", "TRY", "CAD", "AUD", "CHF", "JPY", "CNY", "INR",
    "SEK", "NOK", "DKK", "PLN", "CZK", "HUF", "RON", "BRL", "MXN", "SGD",
    "HKD", "NZD", "ZAR", "AED", "SAR",
]

DEFAULT_CURRENCY = "USD"

_CURRENCY_RE = re.compile(r"\b(" + "|".join(CURRENCY_OPTIONS) + r")\b")
_NUMBER_RE = re.compile(r"\d[\d,.]*")


class SalaryRange(NamedTuple):
    currency: str
    min: str
    max: str


class SalaryExpectation(NamedTuple):
    currency: str
    amount: str


def extract_currency(value: Optional[str]) -> str:
    """
    Guess the currency of a salary string.

    An explicit ISO code wins, then "$" means USD, then "tl"/"try" in any
    case means TRY. Anything else gets the default currency.
    """
    if not value:
        return DEFAULT_CURRENCY
    match = _CURRENCY_RE.search(value)
    if match:
        return match.group(1)
    if "$" in value:
        return "USD"
    lowered = value.lower()
    if "tl" in lowered or "try" in lowered:
        return "TRY"
    return DEFAULT_CURRENCY


def extract_numbers(value: Optional[str]) -> List[str]:
    """Every number-looking run in the string, with thousands commas removed."""
    if not value:
        return []
    return [match.replace(",", "") for match in _NUMBER_RE.findall(value)]


def parse_salary_range(value: Optional[str]) -> SalaryRange:
    numbers = extract_numbers(value)
    return SalaryRange(
        currency=extract_currency(value),
        min=numbers[0] if len(numbers) > 0 else "",
        max=numbers[1] if len(numbers) > 1 else "",
    )


def parse_salary_expectation(value: Optional[str]) -> SalaryExpectation:
    numbers = extract_numbers(value)
    return SalaryExpectation(
        currency=extract_currency(value),
        amount=numbers[0] if numbers else "",
    )


def format_salary_range(currency: Optional[str], min_value: Optional[str], max_value: Optional[str]) -> str:
    currency = currency or DEFAULT_CURRENCY
    min_value = (min_value or "").strip()
    max_value = (max_value or "").strip()
    if not min_value and not max_value:
        return ""
    if min_value and max_value:
        return f"{currency} {min_value}-{max_value}"
    return f"{currency} {min_value or max_value}"


def format_salary_expectation(currency: Optional[str], amount: Optional[str]) -> str:
    amount = (amount or "").strip()
    if not amount:
        return ""
    return f"{currency or DEFAULT_CURRENCY} {amount}"


SALARY_RANGE_FIELDS = ("salary_range_currency", "salary_range_min", "salary_range_max")
SALARY_EXPECTATION_FIELDS = ("salary_expectation_currency", "salary_expectation_amount")


def apply_salary_inputs(data: dict) -> dict:
    """
    Replace the structured salary inputs in `data` with the stored strings.

    Only the groups that were actually sent are formatted, so a partial
    update never clears a salary it did not mention.
    """
    range_parts = {key: data.pop(key) for key in SALARY_RANGE_FIELDS if key in data}
    expectation_parts = {key: data.pop(key) for key in SALARY_EXPECTATION_FIELDS if key in data}

    if range_parts:
        data["company_salary_range"] = format_salary_range(
            *(range_parts.get(key) for key in SALARY_RANGE_FIELDS)
        ) or None
    if expectation_parts:
        data["salary_expectation"] = format_salary_expectation(
            *(expectation_parts.get(key) for key in SALARY_EXPECTATION_FIELDS)
        ) or None
    return data
