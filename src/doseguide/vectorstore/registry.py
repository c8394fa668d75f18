"""
Topic registry: which knowledge store answers which topic.

The table lives in vectorstores.json and is loaded once at startup. Two
layouts are accepted:

    {"vancomycin": "vs_abc", "ciprofloxacin": "vs_def"}

    {"stores": {"vancomycin": {"id": "vs_abc"}, "ciprofloxacin": "vs_def"}}

Topic keys are case-insensitive. A topic missing from the table is never
queried: resolve() returns None and the pipeline rejects the request.
"""

import json
from pathlib import Path
from typing import Any, Iterator, Mapping

from doseguide.errors import TopicNotFound
from doseguide.logging import get_logger

logger = get_logger(__name__, component="topic_registry")


def normalize_topic_key(key: str | None) -> str:
    return str(key or "").strip().lower()


def parse_store_map(data: Any) -> dict[str, str]:
    """Flatten either vectorstores.json layout into {topic_key: store_id}."""
    stores: dict[str, str] = {}
    if not isinstance(data, dict):
        return stores

    for key, value in data.items():
        if isinstance(value, str) and value.strip():
            stores[normalize_topic_key(key)] = value.strip()

    nested = data.get("stores")
    if isinstance(nested, dict):
        for key, value in nested.items():
            if isinstance(value, str) and value.strip():
                stores[normalize_topic_key(key)] = value.strip()
            elif isinstance(value, dict) and isinstance(value.get("id"), str) and value["id"].strip():
                stores[normalize_topic_key(key)] = value["id"].strip()

    return {k: v for k, v in stores.items() if k and v}


class TopicRegistry:
    """
    Read-only topic → store lookup.

    Example:
        registry = TopicRegistry.from_file(Path("vectorstores.json"))
        store_id = registry.resolve("Vancomycin")   # "vs_abc" or None
    """

    def __init__(self, stores: Mapping[str, str] | None = None):
        self._stores = parse_store_map(dict(stores or {}))

    @classmethod
    def from_file(cls, path: Path | str) -> "TopicRegistry":
        """
        Load the registry from a JSON file.

        A missing file gives an empty registry (every topic unsupported).
        Invalid JSON is an error: a broken table should stop startup.
        """
        path = Path(path)
        if not path.exists():
            logger.warning("vectorstores_file_missing", path=str(path))
            return cls()

        data = json.loads(path.read_text(encoding="utf-8"))
        registry = cls(parse_store_map(data))

        logger.info("topic_registry_loaded", path=str(path), topics=len(registry))
        return registry

    def resolve(self, topic_key: str | None) -> str | None:
        return self._stores.get(normalize_topic_key(topic_key))

    def require(self, topic_key: str | None) -> str:
        """Like resolve(), but an unknown topic or a blank store id raises TopicNotFound."""
        store_id = self.resolve(topic_key)
        if not store_id:
            raise TopicNotFound(normalize_topic_key(topic_key), self.supported_keys())
        return store_id

    def supported_keys(self) -> list[str]:
        return sorted(self._stores)

    def items(self) -> list[tuple[str, str]]:
        return sorted(self._stores.items())

    def with_store(self, topic_key: str, store_id: str) -> "TopicRegistry":
        """Return a new registry with one topic added or replaced."""
        key = normalize_topic_key(topic_key)
        if not key or not store_id.strip():
            raise ValueError("topic key and store id must be non-empty")
        return TopicRegistry({**self._stores, key: store_id.strip()})

    def save(self, path: Path | str) -> None:
        """Write the registry in the flat layout."""
        Path(path).write_text(
            json.dumps(dict(self.items()), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )

    def __contains__(self, topic_key: object) -> bool:
        return isinstance(topic_key, str) and self.resolve(topic_key) is not None

    def __len__(self) -> int:
        return len(self._stores)

    def __iter__(self) -> Iterator[str]:
        return iter(self.supported_keys())
