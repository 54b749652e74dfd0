from __future__ import annotations

import html
import re
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Final

import nh3

DEFAULT_MESSAGE: Final[str] = (
    "Your order#{order_number} is {order_status}. Thank you for shopping with us."
)

PLACEHOLDERS: Final[tuple[str, ...]] = (
    "{order_number}",
    "{order_status}",
    "{total_amount}",
    "{order_date}",
)

ORDER_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Markup allowed to survive in a rendered message: the inline and block
# tags a shop owner might paste into a post, nothing scriptable.
ALLOWED_TAGS: Final[frozenset[str]] = frozenset(
    {
        "a",
        "abbr",
        "b",
        "blockquote",
        "br",
        "code",
        "del",
        "em",
        "i",
        "li",
        "ol",
        "p",
        "s",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "u",
        "ul",
    }
)


def format_total(total: str | Decimal) -> str:
    try:
        return f"{Decimal(str(total)):.2f}"
    except InvalidOperation:
        return str(total)


def build_placeholders(
    order_number: str, status: str, total: str | Decimal, created_at: datetime
) -> dict[str, str]:
    return {
        "{order_number}": str(order_number),
        "{order_status}": status,
        "{total_amount}": format_total(total),
        "{order_date}": created_at.strftime(ORDER_DATE_FORMAT),
    }


def sanitize(text: str, tags: frozenset[str] = ALLOWED_TAGS) -> str:
    """
    Strip tags and attributes that are not safe to pass along.

    The result is SMS text, not HTML: entities nh3 escapes on the way out
    (&amp;, &lt;, &gt;) are turned back into the characters they stand for.
    """
    return html.unescape(nh3.clean(text, tags=set(tags)))


def render(template: str, placeholders: Mapping[str, str]) -> str:
    """
    Replace every placeholder token in the template with its value.

    Unknown {tokens} are left untouched. The template is user-editable, so
    the result goes through sanitize() before it is sent anywhere.
    """
    if not placeholders:
        return sanitize(template)

    tokens = sorted(placeholders, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(token) for token in tokens))
    message = pattern.sub(lambda match: placeholders[match.group(0)], template)
    return sanitize(message)
