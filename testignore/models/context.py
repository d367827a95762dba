from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace


@dataclass(slots=True, frozen=True)
class Context:
    """Facts active for one test invocation."""

    backend: str | None = None
    arch: str | None = None
    os: str | None = None
    extra: frozenset[str] = field(default_factory=frozenset)
    # Active tag set, computed once since every rule check reads it.
    tags: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        base = {t for t in (self.backend, self.arch, self.os) if t}
        object.__setattr__(self, "tags", self.extra.union(base))

    def __str__(self) -> str:
        parts = [t for t in (self.backend, self.arch, self.os) if t]
        parts.extend(sorted(self.extra))
        return "+".join(parts) or "<empty>"


def make_context(
    backend: str | None,
    arch: str | None,
    os: str | None,
    extra: Iterable[str] = (),
) -> Context:
    return Context(backend=backend, arch=arch, os=os, extra=frozenset(t for t in extra if t))


def with_aliases(context: Context, aliases: Mapping[str, Iterable[str]]) -> Context:
    """Add every alias that has at least one member among the context's tags."""
    active = context.tags
    hits = {name for name, members in aliases.items() if active.intersection(members)}
    if hits <= active:
        return context
    return replace(context, extra=context.extra.union(hits))
