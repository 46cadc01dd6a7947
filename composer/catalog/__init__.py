"""Static node catalog."""

from .registry import (
    ACTION,
    TRIGGER,
    NodeCatalog,
    NodeTypeDescriptor,
    get_catalog,
    load_catalog,
    parse_catalog,
)

__all__ = [
    'ACTION',
    'TRIGGER',
    'NodeCatalog',
    'NodeTypeDescriptor',
    'get_catalog',
    'load_catalog',
    'parse_catalog',
]
