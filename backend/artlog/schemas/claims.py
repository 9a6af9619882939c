"""
Typed Wikidata claim values.

A claim's ``mainsnak.datavalue.value`` is a plain string for string and
external-id properties (P18 image, P245 ULAN ID) and an object for time and
item properties (P569 birth date, P27 citizenship). Everything else, or a
snak with no value at all, is ``MissingClaim``.

Usage:
    value = first_claim_value(claims, "P569")
    if isinstance(value, ObjectClaim):
        year = year_from_time(value.fields.get("time"))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "StringClaim",
    "ObjectClaim",
    "MissingClaim",
    "ClaimValue",
    "parse_claim_value",
    "claim_values",
    "first_claim_value",
    "year_from_time",
]


@dataclass(frozen=True)
class StringClaim:
    """A claim whose value is a bare string."""

    value: str


@dataclass(frozen=True)
class ObjectClaim:
    """A claim whose value is an object; nested scalars are stringified."""

    fields: dict[str, str] = field(default_factory=dict)

    @property
    def entity_id(self) -> str | None:
        """Referenced item ID for wikibase-entityid values."""
        entity_id = self.fields.get("id")
        if entity_id:
            return entity_id
        numeric_id = self.fields.get("numeric-id")
        if numeric_id:
            return f"Q{numeric_id}"
        return None


@dataclass(frozen=True)
class MissingClaim:
    """No usable value (novalue/somevalue snaks, unexpected shapes)."""


ClaimValue = StringClaim | ObjectClaim | MissingClaim


def parse_claim_value(claim: Any) -> ClaimValue:
    """Parse one raw claim statement into a ClaimValue."""
    if not isinstance(claim, dict):
        return MissingClaim()

    mainsnak = claim.get("mainsnak")
    if not isinstance(mainsnak, dict):
        return MissingClaim()

    datavalue = mainsnak.get("datavalue")
    if not isinstance(datavalue, dict):
        return MissingClaim()

    value = datavalue.get("value")
    if isinstance(value, str):
        return StringClaim(value)
    if isinstance(value, dict):
        fields = {
            str(key): str(item)
            for key, item in value.items()
            if isinstance(item, (str, int, float)) and not isinstance(item, bool)
        }
        return ObjectClaim(fields)
    return MissingClaim()


def claim_values(claims: Any, property_id: str) -> list[ClaimValue]:
    """All values for a property, in statement order."""
    if not isinstance(claims, dict):
        return []
    statements = claims.get(property_id)
    if not isinstance(statements, list):
        return []
    return [parse_claim_value(statement) for statement in statements]


def first_claim_value(claims: Any, property_id: str) -> ClaimValue:
    """The first statement's value for a property, or MissingClaim."""
    values = claim_values(claims, property_id)
    if not values:
        return MissingClaim()
    return values[0]


def year_from_time(time_value: str | None) -> str | None:
    """
    Extract the year from a Wikidata time string.

    ``+1853-03-30T00:00:00Z`` gives ``1853``: the token before the first
    ``-`` with any ``+`` removed. BCE dates start with ``-`` and give None.
    """
    if not time_value:
        return None
    year = time_value.split("-", 1)[0].replace("+", "")
    return year or None
