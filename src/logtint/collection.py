"""All highlighter sets, which of them are active, and the combined set the viewer queries."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from logtint.highlighter import HighlighterSet
from logtint.models import (
    HIGHLIGHTER_SET_COLLECTION_VERSION,
    HighlightColor,
    HighlighterSetCollectionRecord,
    QuickHighlighter,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, MutableMapping

logger = logging.getLogger(__name__)

_COMBINED_SET_NAME = "combined"
_LEGACY_SET_NAME = "Default"

# (name, foreground, background) presets for a fresh installation.
_DEFAULT_QUICK_HIGHLIGHTERS: list[tuple[str, str, str]] = [
    ("Yellow", "#000000", "#ffff00"),
    ("Green", "#000000", "#7fd77f"),
    ("Cyan", "#000000", "#7fdfe0"),
    ("Orange", "#000000", "#ffb347"),
    ("Pink", "#000000", "#ffb6c1"),
    ("Violet", "#ffffff", "#7a4fbf"),
]


def default_quick_highlighters() -> list[QuickHighlighter]:
    """Color presets used when nothing has been stored yet."""
    return [
        QuickHighlighter(name=name, color=HighlightColor(fore_color=fore, back_color=back))
        for name, fore, back in _DEFAULT_QUICK_HIGHLIGHTERS
    ]


class HighlighterSetCollection:
    """Owns every highlighter set and publishes the combined set of the active ones.

    The combined set is rebuilt off to the side and swapped in with a single
    assignment, so a reader holding ``current_active_set()`` always sees a
    complete snapshot, either before or after an edit.
    """

    PERSISTABLE_NAME = "HighlighterSetCollection"

    def __init__(self) -> None:
        self._sets: dict[str, HighlighterSet] = {}
        self._active_ids: list[str] = []
        self._quick_highlighters: list[QuickHighlighter] = []
        self._write_lock = threading.Lock()
        self._combined = HighlighterSet(_COMBINED_SET_NAME)

    # --- sets ---

    # Sets are copied on the way in and out, so an edit only reaches the
    # combined set through add_set, update_set or set_highlighter_sets.
    def highlighter_sets(self) -> list[HighlighterSet]:
        return [s.copy() for s in self._sets.values()]

    def set_highlighter_sets(self, highlighter_sets: Iterable[HighlighterSet]) -> None:
        """Replace every set. Active ids that no longer exist are dropped."""
        self._sets = {s.id: s.copy() for s in highlighter_sets}
        self.update_combined_set()

    def add_set(self, highlighter_set: HighlighterSet) -> None:
        """Add a set, replacing any set with the same id in place."""
        self._sets[highlighter_set.id] = highlighter_set.copy()
        if highlighter_set.id in self._active_ids:
            self.update_combined_set()

    def update_set(self, highlighter_set: HighlighterSet) -> None:
        """Store an edited set and recombine; the route for rule edits."""
        self._sets[highlighter_set.id] = highlighter_set.copy()
        self.update_combined_set()

    def remove_set(self, set_id: str) -> None:
        if self._sets.pop(set_id, None) is None:
            return
        self.update_combined_set()

    def get_set(self, set_id: str) -> HighlighterSet | None:
        found = self._sets.get(set_id)
        return found.copy() if found is not None else None

    def find_set_by_name(self, name: str) -> HighlighterSet | None:
        found = next((s for s in self._sets.values() if s.name == name), None)
        return found.copy() if found is not None else None

    def has_set(self, set_id: str) -> bool:
        return set_id in self._sets

    def has_set_by_name(self, name: str) -> bool:
        return any(s.name == name for s in self._sets.values())

    # --- activation ---

    def active_set_ids(self) -> list[str]:
        return list(self._active_ids)

    def set_active_set_ids(self, set_ids: Iterable[str]) -> None:
        self._active_ids = list(dict.fromkeys(set_ids))
        self.update_combined_set()

    def activate_set(self, set_id: str) -> None:
        if set_id in self._active_ids:
            return
        self._active_ids.append(set_id)
        self.update_combined_set()

    def deactivate_set(self, set_id: str) -> None:
        if set_id not in self._active_ids:
            return
        self._active_ids.remove(set_id)
        self.update_combined_set()

    def deactivate_all(self) -> None:
        self._active_ids = []
        self.update_combined_set()

    def update_combined_set(self) -> None:
        """Rebuild the combined set from the active sets and publish it."""
        with self._write_lock:
            known = [set_id for set_id in self._active_ids if set_id in self._sets]
            if len(known) != len(self._active_ids):
                logger.debug("Dropping %d unknown active set ids", len(self._active_ids) - len(known))
                self._active_ids = known

            combined = HighlighterSet(
                _COMBINED_SET_NAME,
                highlighters=[h for set_id in known for h in self._sets[set_id].highlighters()],
            )
            combined.compile()
            self._combined = combined

    def current_active_set(self) -> HighlighterSet:
        """The set the viewer evaluates lines against."""
        return self._combined

    # --- quick highlighters ---

    def quick_highlighters(self) -> list[QuickHighlighter]:
        return [q.model_copy() for q in self._quick_highlighters]

    def set_quick_highlighters(self, quick_highlighters: Iterable[QuickHighlighter]) -> None:
        self._quick_highlighters = [q.model_copy() for q in quick_highlighters]

    def next_quick_highlighter(self, current: int | None = None) -> int | None:
        """Index of the quick highlighter after ``current`` among those used in the cycle.

        Wraps around; returns None when no quick highlighter takes part in the cycle.
        """
        cycle = [i for i, q in enumerate(self._quick_highlighters) if q.use_in_cycle]
        if not cycle:
            return None
        if current is None:
            return cycle[0]
        return next((i for i in cycle if i > current), cycle[0])

    # --- persistence ---

    def to_record(self) -> dict[str, Any]:
        return {
            "version": HIGHLIGHTER_SET_COLLECTION_VERSION,
            "highlighter_sets": [s.to_record() for s in self._sets.values()],
            "active_sets": list(self._active_ids),
            "quick_highlighters": [q.model_dump() for q in self._quick_highlighters],
        }

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> HighlighterSetCollection:
        """Build a collection from a stored record.

        Malformed sets and quick highlighters are skipped, dangling active ids
        are pruned. Raises ValidationError only when the record itself is malformed.
        """
        record = HighlighterSetCollectionRecord.model_validate(data)
        if record.version > HIGHLIGHTER_SET_COLLECTION_VERSION:
            logger.info(
                "Highlighter collection has version %d, newer than %d; unknown fields ignored",
                record.version,
                HIGHLIGHTER_SET_COLLECTION_VERSION,
            )

        sets: list[HighlighterSet] = []
        for index, set_data in enumerate(record.highlighter_sets):
            try:
                sets.append(HighlighterSet.from_record(set_data))
            except ValidationError as e:
                logger.warning("Skipping highlighter set %d: %s", index, e)

        quick: list[QuickHighlighter] = []
        for index, quick_data in enumerate(record.quick_highlighters):
            try:
                quick.append(QuickHighlighter.model_validate(quick_data))
            except ValidationError as e:
                logger.warning("Skipping quick highlighter %d: %s", index, e)

        active_ids: list[str] = []
        for index, set_id in enumerate(record.active_sets):
            if isinstance(set_id, str):
                active_ids.append(set_id)
            else:
                logger.warning("Skipping active set id %d: not a string: %r", index, set_id)

        collection = cls()
        collection._sets = {s.id: s for s in sets}
        collection._active_ids = list(dict.fromkeys(active_ids))
        collection._quick_highlighters = quick
        collection.update_combined_set()
        return collection

    def save_to_storage(self, settings: MutableMapping[str, Any]) -> None:
        settings[self.PERSISTABLE_NAME] = self.to_record()

    def retrieve_from_storage(self, settings: Mapping[str, Any]) -> None:
        """Replace this collection's state with the stored one.

        Without a stored collection, a lone legacy highlighter set is imported
        and activated; with nothing stored at all the default quick highlighters
        are installed.
        """
        data = settings.get(self.PERSISTABLE_NAME)
        if data is None:
            self._load_legacy(settings)
            return
        try:
            loaded = HighlighterSetCollection.from_record(data)
        except ValidationError as e:
            logger.warning("Ignoring stored highlighter collection: %s", e)
            return

        with self._write_lock:
            self._sets = loaded._sets
            self._active_ids = loaded._active_ids
            self._quick_highlighters = loaded._quick_highlighters
            self._combined = loaded._combined

    def _load_legacy(self, settings: Mapping[str, Any]) -> None:
        self._quick_highlighters = default_quick_highlighters()
        if HighlighterSet.PERSISTABLE_NAME not in settings:
            return
        legacy = HighlighterSet()
        legacy.retrieve_from_storage(settings)
        if not legacy.id:
            return
        if not legacy.name:
            legacy.rename(_LEGACY_SET_NAME)
        logger.info("Importing legacy highlighter set %r", legacy.name)
        self._sets = {legacy.id: legacy}
        self._active_ids = [legacy.id]
        self.update_combined_set()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HighlighterSetCollection):
            return NotImplemented
        return (
            list(self._sets.values()) == list(other._sets.values())
            and self._active_ids == other._active_ids
            and self._quick_highlighters == other._quick_highlighters
        )

    __hash__ = None  # type: ignore[assignment]
