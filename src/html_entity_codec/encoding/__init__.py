"""Entity encoding layer."""

from .engine import (
    MINIMAL_ENTITIES,
    EntityEncoder,
    get_entity,
    hex_reference,
    is_ascii_alnum,
    needs_hex_escape,
)

__all__ = [
    "MINIMAL_ENTITIES",
    "EntityEncoder",
    "get_entity",
    "hex_reference",
    "is_ascii_alnum",
    "needs_hex_escape",
]
