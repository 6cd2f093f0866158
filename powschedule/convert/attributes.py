"""
Typed lookups in a dPOW attribute list.

Attribute lists are short and unordered. Lookup is a case-sensitive match on
the attribute name, and the first match wins when a name occurs more than once.
Values that fail to parse fall back to the caller's default without raising.
"""
import logging
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence, TypeVar
from powschedule.dpow.plan_of_work import Attribute
from powschedule.schedule.project_file import Duration, TimeUnit

logger = logging.getLogger(__name__)

T = TypeVar("T")

# yyyy-MM-ddTHH:mm:ss at the start of the value. Fields need not be zero padded,
# so "2021-6-1T0:0:0" is accepted. Trailing text, such as fractional seconds
# or a zone designator, is ignored.
DATE_PREFIX_PATTERN = re.compile(r"^(\d{1,4})-(\d{1,2})-(\d{1,2})T(\d{1,2}):(\d{1,2}):(\d{1,2})")

# English-locale number: optional minus, digits with optional "," grouping,
# optional "." fraction. Parsing stops at the first character that doesn't fit.
NUMBER_PREFIX_PATTERN = re.compile(r"^-?(?:\d[\d,]*)?(?:\.\d+)?")

SECONDS_PER_DAY = 86400

def _find_attribute(attributes: Sequence[Attribute], key: str) -> Optional[Attribute]:
    for attribute in attributes:
        if attribute.name == key:
            return attribute
    return None

def string_from_attribute(attributes: Sequence[Attribute], key: str) -> Optional[str]:
    """Value of the first attribute named ``key``, or None."""
    attribute = _find_attribute(attributes, key)
    if attribute is None:
        return None
    return attribute.value

def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a ``yyyy-MM-ddTHH:mm:ss`` value. Returns None if it doesn't parse."""
    if value is None:
        return None
    match = DATE_PREFIX_PATTERN.match(value)
    if match is None:
        return None
    try:
        return datetime(*(int(group) for group in match.groups()))
    except ValueError:
        # Right shape, impossible date, like month 13.
        return None

def parse_number(value: Optional[str]) -> Optional[Decimal]:
    """Parse an English-locale decimal number, independent of the host locale. Returns None if it doesn't parse."""
    if value is None:
        return None
    match = NUMBER_PREFIX_PATTERN.match(value)
    if match is None:
        return None
    text = match.group(0).replace(",", "")
    if not any(c.isdigit() for c in text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None

def date_from_attribute(attributes: Sequence[Attribute], key: str, default: T) -> datetime | T:
    attribute = _find_attribute(attributes, key)
    if attribute is None:
        return default
    parsed = parse_date(attribute.value)
    if parsed is None:
        logger.debug(f"Unable to parse date attribute {key!r}: {attribute.value!r}")
        return default
    return parsed

def number_from_attribute(attributes: Sequence[Attribute], key: str, default: T) -> Decimal | T:
    attribute = _find_attribute(attributes, key)
    if attribute is None:
        return default
    parsed = parse_number(attribute.value)
    if parsed is None:
        logger.debug(f"Unable to parse number attribute {key!r}: {attribute.value!r}")
        return default
    return parsed

def duration_between(start: Optional[datetime], finish: Optional[datetime]) -> Duration:
    """
    Days between two dates, never negative.
    A missing start or finish gives a zero duration.
    """
    if start is None or finish is None:
        return Duration.zero()
    days = (finish - start).total_seconds() / SECONDS_PER_DAY
    return Duration(max(0.0, days), TimeUnit.DAYS)
