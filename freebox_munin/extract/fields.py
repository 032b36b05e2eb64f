"""
Pattern-based field extraction from router pages.

Router pages are loosely structured HTML, so numbers are located textually:
an *anchor* picks the lines holding the field, and the *unit* that follows the
number on the page delimits it.  Pages without distinguishing labels (the ADSL
statistics table) are addressed by the *occurrence* of a unit across the page
instead.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from bs4 import BeautifulSoup

_BS4_PARSER = "lxml"

# Whitespace the router may put between a number and its unit
_GAP = r"(?:\s|&nbsp;|&#160;)*"


@lru_cache(maxsize=None)
def _unit_pattern(unit: str) -> re.Pattern:
    return re.compile(r"([0-9]+)" + _GAP + re.escape(unit.strip()))


def extract_region(page_text: str, anchor: str) -> str | None:
    """Return the lines of *page_text* containing *anchor*, or None if there are none."""
    lines = [line for line in page_text.splitlines() if anchor in line]
    return "\n".join(lines) if lines else None


def extract(
    page_text: str,
    anchor: str | None,
    unit: str,
    occurrence: int = 1,
) -> int | None:
    """
    Return the integer written right before *unit*, or None when absent.

    With an *anchor*, only the lines containing it are searched; without one
    the whole page is.  Matches are non-overlapping and taken in document
    order; *occurrence* (1-based) selects among them.

    Args:
        page_text: Raw page text
        anchor: Literal text identifying the field's line(s), or None
        unit: Unit text following the number, e.g. ``" dB"`` or ``"°C"``;
            surrounding whitespace in it is not significant
        occurrence: Which match to return, starting at 1

    Returns:
        The matched number, or None if fewer than *occurrence* matches exist
    """
    if occurrence < 1:
        raise ValueError(f"occurrence is 1-based, got {occurrence}")

    region = page_text if anchor is None else extract_region(page_text, anchor)
    if region is None:
        return None

    for index, match in enumerate(_unit_pattern(unit).finditer(region), start=1):
        if index == occurrence:
            return int(match.group(1))
    return None


def extract_text(page_text: str, anchor: str) -> str | None:
    """Return the stripped text of the element whose id or class is *anchor*."""
    soup = BeautifulSoup(page_text, _BS4_PARSER)
    node = soup.find(id=anchor) or soup.find(class_=anchor)
    if node is None:
        return None
    return node.get_text(strip=True)


@dataclass(frozen=True)
class FieldSpec:
    """Declarative locator for one numeric field of a page."""

    anchor: str | None
    unit: str
    occurrence: int = 1

    def extract(self, page_text: str) -> int | None:
        return extract(page_text, self.anchor, self.unit, self.occurrence)
