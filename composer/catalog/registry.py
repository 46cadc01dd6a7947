import copy
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

import structlog
import yaml

from composer.config import get_settings
from composer.errors import CatalogError

logger = structlog.get_logger(__name__)

BUNDLED_CATALOG = Path(__file__).parent / "nodes.yaml"

TRIGGER = "trigger"
ACTION = "action"

TRIGGER_KINDS = {"webhook", "schedule", "manual", "event"}
ACTION_KINDS = {"service", "messaging", "http", "data", "ai", "flow"}


@dataclass(frozen=True)
class NodeTypeDescriptor:
    """Static description of one n8n node type the generator can emit."""
    key: str
    type_id: str
    type_version: Union[int, float]
    label: str
    category: str
    kind: str
    match_keywords: Tuple[str, ...]
    exclude_keywords: Tuple[str, ...] = ()
    match_patterns: Tuple[str, ...] = ()
    default_parameters: Mapping[str, Any] = field(default_factory=dict, compare=False)
    operations: Mapping[str, str] = field(default_factory=dict, compare=False)
    field_map: Mapping[str, str] = field(default_factory=dict, compare=False)
    extractor: Optional[str] = None
    quoted_field: Optional[str] = None
    destination: bool = False
    fallback: bool = False
    summary: str = ""

    @property
    def is_trigger(self) -> bool:
        return self.category == TRIGGER

    def parameters(self) -> Dict[str, Any]:
        """Return a private, mutable copy of the default parameters."""
        return copy.deepcopy(dict(self.default_parameters))


class NodeCatalog:
    """Read-only, ordered table of node type descriptors.

    Declaration order inside each category is the match priority used by the
    classifier.
    """

    def __init__(self, triggers: Tuple[NodeTypeDescriptor, ...], actions: Tuple[NodeTypeDescriptor, ...]):
        self._triggers = tuple(triggers)
        self._actions = tuple(actions)
        self._by_key = {d.key: d for d in self._triggers + self._actions}

        fallbacks = [d for d in self._actions if d.fallback]
        if len(fallbacks) != 1:
            raise CatalogError(f"Catalog must declare exactly one fallback action, found {len(fallbacks)}")
        self._fallback = fallbacks[0]

    @property
    def triggers(self) -> Tuple[NodeTypeDescriptor, ...]:
        return self._triggers

    @property
    def actions(self) -> Tuple[NodeTypeDescriptor, ...]:
        return self._actions

    @property
    def fallback(self) -> NodeTypeDescriptor:
        return self._fallback

    def get(self, key: str) -> Optional[NodeTypeDescriptor]:
        """Get a descriptor by catalog key"""
        return self._by_key.get(key)

    def descriptors(self, category: Optional[str] = None) -> List[NodeTypeDescriptor]:
        if category == TRIGGER:
            return list(self._triggers)
        if category == ACTION:
            return list(self._actions)
        return list(self._triggers + self._actions)

    def __iter__(self) -> Iterator[NodeTypeDescriptor]:
        return iter(self._triggers + self._actions)

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key


def _freeze(value: Any) -> Mapping[str, Any]:
    return MappingProxyType(copy.deepcopy(dict(value or {})))


def _string_tuple(entry: Dict[str, Any], name: str, key: str) -> Tuple[str, ...]:
    values = entry.get(name) or []
    if not isinstance(values, list) or not all(isinstance(v, str) and v.strip() for v in values):
        raise CatalogError(f"Catalog entry '{key}': '{name}' must be a list of non-empty strings")
    return tuple(v.strip().lower() for v in values)


def _patterns(entry: Dict[str, Any], key: str) -> Tuple[str, ...]:
    patterns = entry.get("patterns") or []
    if not isinstance(patterns, list) or not all(isinstance(p, str) and p for p in patterns):
        raise CatalogError(f"Catalog entry '{key}': 'patterns' must be a list of regular expressions")
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            raise CatalogError(f"Catalog entry '{key}': invalid pattern '{pattern}': {e}")
    return tuple(patterns)


def _parse_entry(entry: Dict[str, Any], category: str) -> NodeTypeDescriptor:
    if not isinstance(entry, dict):
        raise CatalogError(f"Catalog {category} entries must be mappings, got {type(entry).__name__}")

    for required in ("key", "type", "version", "label", "kind"):
        if required not in entry:
            raise CatalogError(f"Catalog {category} entry is missing required field '{required}': {entry}")

    key = str(entry["key"])
    kind = entry["kind"]
    allowed_kinds = TRIGGER_KINDS if category == TRIGGER else ACTION_KINDS
    if kind not in allowed_kinds:
        raise CatalogError(f"Catalog entry '{key}': unknown {category} kind '{kind}'")

    keywords = _string_tuple(entry, "keywords", key)
    fallback = bool(entry.get("fallback", False))
    if not keywords and not entry.get("patterns") and not fallback:
        raise CatalogError(f"Catalog entry '{key}' declares no keywords")
    if fallback and category == TRIGGER:
        raise CatalogError(f"Catalog entry '{key}': triggers cannot be fallbacks")

    parameters = entry.get("parameters") or {}
    if not isinstance(parameters, dict):
        raise CatalogError(f"Catalog entry '{key}': 'parameters' must be a mapping")

    return NodeTypeDescriptor(
        key=key,
        type_id=str(entry["type"]),
        type_version=entry["version"],
        label=str(entry["label"]),
        category=category,
        kind=kind,
        match_keywords=keywords,
        exclude_keywords=_string_tuple(entry, "exclude", key),
        match_patterns=_patterns(entry, key),
        default_parameters=_freeze(parameters),
        operations=_freeze(entry.get("operations")),
        field_map=_freeze(entry.get("field_map")),
        extractor=entry.get("extractor"),
        quoted_field=entry.get("quoted_field"),
        destination=bool(entry.get("destination", False)),
        fallback=fallback,
        summary=str(entry.get("summary", "")),
    )


def parse_catalog(data: Dict[str, Any]) -> NodeCatalog:
    """Build a catalog from already-loaded YAML data."""
    if not isinstance(data, dict):
        raise CatalogError("Catalog document must be a mapping with 'triggers' and 'actions'")

    triggers = tuple(_parse_entry(e, TRIGGER) for e in data.get("triggers") or [])
    actions = tuple(_parse_entry(e, ACTION) for e in data.get("actions") or [])

    if not triggers:
        raise CatalogError("Catalog declares no trigger entries")
    if not actions:
        raise CatalogError("Catalog declares no action entries")

    keys = [d.key for d in triggers + actions]
    duplicates = sorted({k for k in keys if keys.count(k) > 1})
    if duplicates:
        raise CatalogError(f"Duplicate catalog keys: {', '.join(duplicates)}")

    return NodeCatalog(triggers, actions)


def load_catalog(path: Optional[Path] = None) -> NodeCatalog:
    """Load and validate a catalog YAML file (the bundled one by default)."""
    catalog_file = Path(path) if path else BUNDLED_CATALOG
    try:
        with open(catalog_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid catalog YAML in {catalog_file}: {e}")

    catalog = parse_catalog(data)
    logger.info(
        "catalog_loaded",
        path=str(catalog_file),
        triggers=len(catalog.triggers),
        actions=len(catalog.actions),
    )
    return catalog


@lru_cache()
def _cached_catalog(path: Optional[Path]) -> NodeCatalog:
    return load_catalog(path)


def get_catalog() -> NodeCatalog:
    """Process-wide catalog, built once per configured path."""
    return _cached_catalog(get_settings().catalog_path)
