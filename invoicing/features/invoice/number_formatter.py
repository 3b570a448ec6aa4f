"""
Invoice Number Formatter Module

This module turns a configured number template such as ``{Y}/{cy,3}`` into
the next invoice number.

Features:
- Placeholder parsing
- Date components
- Global and customer counters
- Counter increments
- Zero padding

Template Syntax:
- ``{date}``: reference date as yymmdd
- ``{Y}`` / ``{y}``: 4 / 2 digit year
- ``{M}`` / ``{m}``: zero padded / plain month
- ``{D}`` / ``{d}``: zero padded / plain day
- ``{c}``, ``{cy}``, ``{cm}``, ``{cd}``: invoices of all time, year, month, day
- ``{cc}``, ``{ccy}``, ``{ccm}``, ``{ccd}``: the same, for the customer only
- ``{<counter>+<n>}``: advance the counter by n (at least 1)
- ``{<key>,<width>}``: left pad with zeros to width

Unknown or malformed placeholders are copied to the output unchanged and an
invalid width, or one above MAX_WIDTH, is ignored; formatting never fails on
template content.

Dependencies:
- dataclasses for the context
- re for token validation
- logging for tracking

Author: Invoicing Development Team
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterator, Optional, Set, Tuple
import logging
import re

from invoicing.shared.models import CounterScope

logger = logging.getLogger(__name__)

CounterRead = Callable[[CounterScope, Optional[str]], int]

DATE_KEYS = {
    "date": lambda d: f"{d.year % 100:02d}{d.month:02d}{d.day:02d}",
    "Y": lambda d: f"{d.year:04d}",
    "y": lambda d: f"{d.year % 100:02d}",
    "M": lambda d: f"{d.month:02d}",
    "m": lambda d: str(d.month),
    "D": lambda d: f"{d.day:02d}",
    "d": lambda d: str(d.day),
}

# key -> (scope, customer scoped)
COUNTER_KEYS = {
    "c": (CounterScope.ALL, False),
    "cy": (CounterScope.YEAR, False),
    "cm": (CounterScope.MONTH, False),
    "cd": (CounterScope.DAY, False),
    "cc": (CounterScope.ALL, True),
    "ccy": (CounterScope.YEAR, True),
    "ccm": (CounterScope.MONTH, True),
    "ccd": (CounterScope.DAY, True),
}

MAX_WIDTH = 64

_WIDTH_PATTERN = re.compile(r"0*([0-9]{1,3})")
_INCREMENT_PATTERN = re.compile(r"[+-]?[0-9]{1,18}")


class InvalidContext(ValueError):
    """A required formatting input (reference date, counters, customer) is missing."""


@dataclass(frozen=True)
class FormatContext:
    """
    Inputs a template is resolved against.

    Attributes:
        reference_date (date): Date for date components and counter periods
        counter (CounterRead): Returns the stored (last used) counter for a
            scope, customer scoped when a customer id is passed
        customer_id (Optional[str]): Customer for the ``cc*`` counters
    """
    reference_date: Optional[date]
    counter: Optional[CounterRead]
    customer_id: Optional[str] = None


@dataclass(frozen=True)
class Token:
    """A parsed ``{key[+increment][,width]}`` placeholder."""
    key: str
    increment: int = 0
    width: Optional[int] = None

    @property
    def is_counter(self) -> bool:
        return self.key in COUNTER_KEYS

    @property
    def step(self) -> int:
        # a counter always advances by at least one
        return max(self.increment, 1)


def parse_token(body: str) -> Optional[Token]:
    """
    Parse the text between the braces of a placeholder.

    Args:
        body (str): Placeholder content without braces, e.g. ``c+13,2``

    Returns:
        Optional[Token]: Parsed token, or None when the key is unknown or
        the increment is malformed or longer than 18 digits
    """
    key_part, comma, suffix = body.partition(",")
    width = None
    match = _WIDTH_PATTERN.fullmatch(suffix) if comma else None
    if match and int(match.group(1)) <= MAX_WIDTH:
        width = int(match.group(1))

    key, plus, increment_text = key_part.partition("+")
    if key in DATE_KEYS:
        if plus:
            return None
        return Token(key, width=width)

    if key in COUNTER_KEYS:
        increment = 0
        if plus:
            if not _INCREMENT_PATTERN.fullmatch(increment_text):
                return None
            increment = int(increment_text)
        return Token(key, increment, width)

    return None


def iter_segments(template: str) -> Iterator[Tuple[str, Optional[Token]]]:
    """
    Split a template into literal runs and placeholders.

    Yields:
        Tuple[str, Optional[Token]]: Original text and its token, the token
        being None for literal text and unparseable placeholders
    """
    position = 0
    length = len(template)
    while position < length:
        start = template.find("{", position)
        if start == -1:
            yield template[position:], None
            return
        if start > position:
            yield template[position:start], None

        end = template.find("}", start + 1)
        if end == -1:
            # unmatched brace, the remainder is literal
            yield template[start:], None
            return

        yield template[start:end + 1], parse_token(template[start + 1:end])
        position = end + 1


def referenced_counters(template: str) -> Set[Tuple[CounterScope, bool]]:
    """Return the (scope, customer scoped) counters a template reads."""
    return {
        COUNTER_KEYS[token.key]
        for _, token in iter_segments(template)
        if token is not None and token.is_counter
    }


def _validate(context: FormatContext):
    if context is None:
        raise InvalidContext("A format context is required")
    if not isinstance(context.reference_date, date):
        raise InvalidContext("A reference date is required")
    if not callable(context.counter):
        raise InvalidContext("A counter source is required")


def _resolve(token: Token, context: FormatContext) -> str:
    if token.is_counter:
        scope, customer_scoped = COUNTER_KEYS[token.key]
        customer_id = None
        if customer_scoped:
            if context.customer_id is None:
                raise InvalidContext(f"Placeholder '{token.key}' requires a customer")
            customer_id = context.customer_id
        value = str(int(context.counter(scope, customer_id)) + token.step)
    else:
        value = DATE_KEYS[token.key](context.reference_date)

    if token.width:
        value = value.rjust(token.width, "0")
    return value


def format_number(template: str, context: FormatContext) -> str:
    """
    Render an invoice number from a template.

    Args:
        template (str): Number template, e.g. ``{Y}/{cy,3}``
        context (FormatContext): Reference date, counters and customer

    Returns:
        str: The formatted number

    Raises:
        InvalidContext: When the reference date or counter source is missing,
            or a customer counter is used without a customer
    """
    _validate(context)

    parts = []
    for text, token in iter_segments(template):
        if token is None:
            parts.append(text)
            continue
        resolved = _resolve(token, context)
        logger.debug(f"Resolved {text} to {resolved}")
        parts.append(resolved)

    return "".join(parts)
