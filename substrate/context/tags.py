"""Immutable tag sets.

A TagSet is a read-only mapping. patch() never touches the receiver; it
returns a new TagSet, so emitters derived from a common ancestor can never
observe each other's later patches.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from substrate.shared.errors import InvalidPatchArgumentError

if TYPE_CHECKING:
    from substrate.shared.types import TagPatch, Tags, TagValue


class TagSet(Mapping[str, Any]):
    """Read-only mapping of tag keys to values.

    Immutability is shallow: the top-level mapping is a private copy behind a
    MappingProxyType, nested containers are kept as given.
    """

    __slots__ = ("_tags",)

    def __init__(self, tags: Tags | None = None) -> None:
        self._tags: Mapping[str, TagValue] = MappingProxyType(dict(tags or {}))

    def __getitem__(self, key: str) -> TagValue:
        return self._tags[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __repr__(self) -> str:
        return f"TagSet({dict(self._tags)!r})"

    def as_dict(self) -> dict[str, TagValue]:
        """Return a fresh, mutable copy of the tags."""
        return dict(self._tags)

    def patch(self, patch: TagPatch = None) -> TagSet:
        """Derive a new TagSet.

        Args:
            patch: A callable receiving the current (read-only) tags and
                returning the full replacement mapping, a mapping merged over
                the current tags, or None for an unchanged copy.

        Raises:
            InvalidPatchArgumentError: patch is of any other type, or the
                callable did not return a mapping.
        """
        if patch is None:
            return TagSet(self._tags)
        if isinstance(patch, Mapping):
            return TagSet({**self._tags, **patch})
        if callable(patch):
            replacement = patch(self._tags)
            if not isinstance(replacement, Mapping):
                raise InvalidPatchArgumentError(
                    type(replacement).__name__,
                    f"Tag patch callable must return a mapping, got {type(replacement).__name__}",
                )
            return TagSet(replacement)
        raise InvalidPatchArgumentError(type(patch).__name__)
