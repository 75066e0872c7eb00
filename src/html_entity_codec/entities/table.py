"""Static named character reference table.

Built once at import from the WHATWG HTML5 entity list shipped with the
standard library. Only semicolon-terminated names are included, and keys are
the full reference text including delimiters (``"&amp;"``), so a decoder can
look up its pending buffer verbatim. Names are case-sensitive.
"""

import html.entities
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Optional


@dataclass(frozen=True)
class NamedEntity:
    """Entity reference text and the characters it stands for."""

    name: str         # e.g. "&amp;"
    characters: str   # e.g. "&"

    @property
    def bare_name(self) -> str:
        """Name without the leading ``&`` and trailing ``;``."""
        return self.name[1:-1]


def _build_table() -> Mapping[str, str]:
    table = {}
    for key, value in html.entities.html5.items():
        # Legacy forms such as "amp" (no semicolon) are never looked up.
        if key.endswith(";"):
            table["&" + key] = value
    return MappingProxyType(table)


ENTITIES: Mapping[str, str] = _build_table()


def lookup(reference: str) -> Optional[str]:
    """Return the replacement text for ``reference`` (e.g. ``"&lt;"``), or None."""
    return ENTITIES.get(reference)


def get_entity(reference: str) -> NamedEntity:
    """Return the record for ``reference``.

    Raises:
        KeyError: if the reference is not a known entity
    """
    return NamedEntity(reference, ENTITIES[reference])


def iter_entities() -> Iterator[NamedEntity]:
    """Iterate all entities in name order."""
    for name in sorted(ENTITIES):
        yield NamedEntity(name, ENTITIES[name])
