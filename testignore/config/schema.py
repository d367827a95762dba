from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from testignore.services.conditions import is_valid_tag


class ConfigValueError(ValueError):
    """A config key holds a value of the wrong shape."""

    def __init__(self, key: str, detail: str) -> None:
        super().__init__(f"{key} {detail}")
        self.key = key


@dataclass(slots=True)
class AppConfig:
    manifest_path: str = "tests/ignores.txt"
    comment_marker: str = "#"
    aliases: dict[str, list[str]] = field(default_factory=dict)
    known_tags: list[str] = field(default_factory=list)
    default_backend: str | None = None
    fail_open: bool = False

    def vocabulary(self) -> set[str]:
        """Known tags plus alias names, for the unknown-tag lint."""
        return set(self.known_tags).union(self.aliases)

    def to_dict(self) -> dict[str, Any]:
        return {
            "manifestPath": self.manifest_path,
            "commentMarker": self.comment_marker,
            "aliases": {name: list(members) for name, members in self.aliases.items()},
            "knownTags": list(self.known_tags),
            "defaultBackend": self.default_backend,
            "failOpen": self.fail_open,
        }


CONFIG_KEYS = frozenset(AppConfig().to_dict())


def _tag(value: Any, key: str) -> str:
    if not isinstance(value, str) or not is_valid_tag(value):
        raise ConfigValueError(key, f"has {value!r}, which is not a valid tag")
    return value


def _tag_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list):
        raise ConfigValueError(key, "must be a list of tags")
    return [_tag(x, key) for x in value]


def _parse_aliases(value: Any) -> dict[str, list[str]]:
    if not isinstance(value, dict):
        raise ConfigValueError("aliases", "must be an object mapping alias names to tag lists")
    return {_tag(name, "aliases"): _tag_list(members, f"aliases.{name}") for name, members in value.items()}


def _string(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigValueError(key, "must be a string")
    return value


def _bool(value: Any, key: str) -> bool:
    # JSON booleans only: bool("false") would be True.
    if not isinstance(value, bool):
        raise ConfigValueError(key, "must be true or false")
    return value


def from_dict(data: dict[str, Any], defaults: AppConfig) -> AppConfig:
    """Build a config from decoded JSON, falling back to *defaults* per key.

    Raises ``ConfigValueError`` naming the first key with a bad value.
    """
    manifest_path = _string(data.get("manifestPath", defaults.manifest_path), "manifestPath").strip()
    if not manifest_path:
        raise ConfigValueError("manifestPath", "must not be empty")
    marker = _string(data.get("commentMarker", defaults.comment_marker), "commentMarker").strip()
    backend_raw = data.get("defaultBackend", defaults.default_backend)

    return AppConfig(
        manifest_path=manifest_path,
        comment_marker=marker or defaults.comment_marker,
        aliases=_parse_aliases(data["aliases"]) if "aliases" in data else dict(defaults.aliases),
        known_tags=_tag_list(data["knownTags"], "knownTags") if "knownTags" in data else list(defaults.known_tags),
        default_backend=_tag(backend_raw, "defaultBackend") if backend_raw is not None else None,
        fail_open=_bool(data.get("failOpen", defaults.fail_open), "failOpen"),
    )
