"""
Details documents written to the audit ledger.

One shape per action kind so readers can rely on the keys:

    create        {"<entity>": snapshot}
    update        {"old_<entity>": snapshot, "new_<entity>": snapshot}
    delete        {"<entity>": snapshot}
    batch_create  {"count": n, "<entities>": [snapshot, ...]}

Snapshots are plain dicts built from the frozen domain entities.
"""
import dataclasses
from enum import Enum
from typing import Any, Dict, Iterable, List


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, frozenset, set)):
        items = [_plain(item) for item in value]
        return sorted(items) if isinstance(value, (frozenset, set)) else items
    return value


def snapshot(entity) -> Dict[str, Any]:
    """Dict form of a domain entity; enums become their values, sets sorted lists."""
    if entity is None:
        return None
    if dataclasses.is_dataclass(entity):
        return _plain(dataclasses.asdict(entity))
    return _plain(entity)


def created(entity_name: str, entity) -> Dict[str, Any]:
    return {entity_name: snapshot(entity)}


def updated(entity_name: str, old, new, **extra) -> Dict[str, Any]:
    details = {f"old_{entity_name}": snapshot(old), f"new_{entity_name}": snapshot(new)}
    details.update({key: _plain(value) for key, value in extra.items()})
    return details


def deleted(entity_name: str, entity) -> Dict[str, Any]:
    return {entity_name: snapshot(entity)}


def batch_created(collection_name: str, entities: Iterable) -> Dict[str, Any]:
    items: List[Dict[str, Any]] = [snapshot(entity) for entity in entities]
    return {"count": len(items), collection_name: items}
