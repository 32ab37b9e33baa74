"""Alias index: map every normalized title, slug and path of a note to its id."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .models import AliasCollisionError, Note

log = logging.getLogger(__name__)

AliasIndex = Mapping[str, str]

COLLISION_POLICIES = ("last", "first", "error")


def normalize_alias(text: str) -> str:
    return text.strip().lower()


def build_alias_index(
    notes: Iterable[Note],
    *,
    on_collision: str = "last",
) -> AliasIndex:
    """Build a read-only alias -> note id mapping.

    Notes are consumed in the order given; callers pass them sorted by path
    so that repeated builds over the same corpus produce the same index.

    Args:
        notes: Notes in scan order.
        on_collision: What happens when two different notes normalize to the
            same alias. "last" keeps the later note, "first" keeps the earlier
            one, "error" raises AliasCollisionError.
    """
    if on_collision not in COLLISION_POLICIES:
        raise ValueError(
            f"Unknown collision policy {on_collision!r}, "
            f"expected one of {', '.join(COLLISION_POLICIES)}"
        )

    index: dict[str, str] = {}
    count = 0

    for note in notes:
        count += 1
        for candidate in note.alias_candidates:
            alias = normalize_alias(candidate)
            if not alias:
                continue

            existing = index.get(alias)
            if existing is not None and existing != note.id:
                log.debug(
                    "Alias %r: %s collides with %s (policy=%s)",
                    alias, note.id, existing, on_collision,
                )
                if on_collision == "error":
                    raise AliasCollisionError(alias, existing, note.id)
                if on_collision == "first":
                    continue

            index[alias] = note.id

    log.debug("Built alias index: %d aliases for %d notes", len(index), count)
    return MappingProxyType(index)
