"""
Profile Extraction

Keyword-based extraction of a UserProfile from a free-text relocation query.
Each table is scanned in order and the first keyword contained in the
lower-cased query wins, so more specific keywords are listed first.
"""

import re

from migration_agent.core.domain.models import UserProfile

PROFESSIONS: tuple[tuple[str, str], ...] = (
    ("software engineer", "software engineer"),
    ("data scientist", "data scientist"),
    ("engineer", "engineer"),
    ("developer", "developer"),
    ("programmer", "programmer"),
    ("doctor", "doctor"),
    ("nurse", "nurse"),
    ("teacher", "teacher"),
    ("accountant", "accountant"),
    ("designer", "designer"),
    ("manager", "manager"),
    ("analyst", "analyst"),
    ("consultant", "consultant"),
)

DESTINATIONS: tuple[tuple[str, str], ...] = (
    ("united states", "USA"),
    ("united kingdom", "UK"),
    ("new zealand", "New Zealand"),
    ("south korea", "South Korea"),
    ("switzerland", "Switzerland"),
    ("netherlands", "Netherlands"),
    ("australia", "Australia"),
    ("singapore", "Singapore"),
    ("germany", "Germany"),
    ("britain", "UK"),
    ("america", "USA"),
    ("denmark", "Denmark"),
    ("canada", "Canada"),
    ("france", "France"),
    ("sweden", "Sweden"),
    ("norway", "Norway"),
    ("japan", "Japan"),
    ("dubai", "UAE"),
    ("usa", "USA"),
    ("uae", "UAE"),
    ("uk", "UK"),
)

ORIGINS: tuple[tuple[str, str], ...] = (
    ("south africa", "South Africa"),
    ("philippines", "Philippines"),
    ("bangladesh", "Bangladesh"),
    ("argentina", "Argentina"),
    ("ethiopia", "Ethiopia"),
    ("pakistan", "Pakistan"),
    ("tanzania", "Tanzania"),
    ("nigeria", "Nigeria"),
    ("morocco", "Morocco"),
    ("uganda", "Uganda"),
    ("brazil", "Brazil"),
    ("mexico", "Mexico"),
    ("ghana", "Ghana"),
    ("kenya", "Kenya"),
    ("egypt", "Egypt"),
    ("india", "India"),
    ("china", "China"),
)

# "$5000", "$5,000", "$5k"; only the leading whole dollars of "$5.5k" count
_BUDGET_PATTERN = re.compile(r"\$([\d,.]*)(k)?")
_LEADING_DIGITS = re.compile(r"\d+")


def _first_match(query: str, table: tuple[tuple[str, str], ...]) -> str:
    for keyword, value in table:
        if keyword in query:
            return value
    return ""


def extract_budget(query: str) -> int:
    """
    Extract a dollar budget from a lower-cased query.

    Only the first ``$`` is considered and the amount must follow it
    directly. Commas are ignored, anything from a decimal point on is
    dropped and a trailing ``k`` multiplies the amount by 1000.

    Returns:
        Budget in whole dollars, 0 when no amount is present
    """
    match = _BUDGET_PATTERN.search(query)
    if not match:
        return 0

    digits = _LEADING_DIGITS.match(match.group(1).replace(",", ""))
    if not digits:
        return 0

    amount = int(digits.group())
    if match.group(2):
        amount *= 1000
    return amount


def extract_profile(query: str) -> UserProfile:
    """
    Extract profession, destination, origin and budget from a query.

    Total function: fields that cannot be found are left empty (or 0 for
    the budget).

    Example:
        >>> extract_profile("software engineer from Nigeria, want to move to Canada with $5,000")
        UserProfile(profession='software engineer', destination='Canada', origin='Nigeria', budget=5000)
    """
    query_lower = query.lower()
    return UserProfile(
        profession=_first_match(query_lower, PROFESSIONS),
        destination=_first_match(query_lower, DESTINATIONS),
        origin=_first_match(query_lower, ORIGINS),
        budget=extract_budget(query_lower),
    )
