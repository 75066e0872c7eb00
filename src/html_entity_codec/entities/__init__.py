"""Named character reference table."""

from .table import ENTITIES, NamedEntity, get_entity, iter_entities, lookup

__all__ = ["ENTITIES", "NamedEntity", "get_entity", "iter_entities", "lookup"]
