from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from lightshuttle.utils.logger import get_logger

logger = get_logger("lightshuttle.auth")

KeyStore = Mapping[str, "Namespace"]

EMPTY_KEY_STORE: KeyStore = MappingProxyType({})


@dataclass(frozen=True)
class Namespace:
    """Access principal resolved from a static API key."""

    name: str
    read: bool = False
    write: bool = False

    def can_read(self) -> bool:
        return self.read

    def can_write(self) -> bool:
        return self.write

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Namespace":
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("namespace entry needs a non-empty 'name'")
        return cls(name=name, read=bool(data.get("read", False)), write=bool(data.get("write", False)))


def parse_key_store(data: Any) -> KeyStore:
    """``{"<key>": {"name": ..., "read": bool, "write": bool}}`` -> KeyStore."""
    if not isinstance(data, dict):
        raise ValueError("key file must contain a JSON object")
    store = {}
    for key, entry in data.items():
        if not isinstance(entry, dict):
            raise ValueError(f"entry for key {key[:4]}... is not an object")
        store[str(key)] = Namespace.from_dict(entry)
    return MappingProxyType(store)


def load_key_store(path: Optional[str]) -> KeyStore:
    """Load the key file once at startup.

    A missing, unreadable or malformed file disables static-key auth: an
    empty store is returned and the problem is logged.
    """
    if not path:
        return EMPTY_KEY_STORE
    try:
        raw = Path(path).read_text(encoding="utf-8")
        store = parse_key_store(json.loads(raw))
    except (OSError, ValueError) as e:
        logger.error(f"Could not load API key file {path}: {e}; static key auth disabled")
        return EMPTY_KEY_STORE
    logger.info(f"Loaded {len(store)} API key(s) from {path}")
    return store


__all__ = ["Namespace", "KeyStore", "EMPTY_KEY_STORE", "load_key_store", "parse_key_store"]
