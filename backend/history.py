"""
Saved roll history.

Each save is a snapshot: OD/ID/thickness stay in the unit that was active
when the roll was saved, lengths are rounded to 2 decimals, and the list is
kept newest first. Nothing is edited in place.

Rolls carry two identifiers. `saved_at` (epoch ms) is what the list has
always been keyed on for deletes; two saves in the same millisecond share
it, so remove(saved_at) deletes the first match only. `entry_id` is unique
per entry and is what remove_by_id() and load lookups use.
"""

import logging
import time
from typing import Callable, List, Optional, Tuple

from .persistence import PersistenceAdapter
from .schemas import CalcResult, CalcValid, RollInputs, SavedRoll
from .units import (
    DIAMETER_DECIMALS,
    LENGTH_DECIMALS,
    THICKNESS_IN_DECIMALS,
    format_number,
    round_to,
)

logger = logging.getLogger(__name__)

HISTORY_KEY = "savedRolls"


def now_ms() -> int:
    return int(time.time() * 1000)


def _missing_ids(raw) -> bool:
    """True when stored entries predate entry_id."""
    return isinstance(raw, list) and any(
        isinstance(entry, dict) and not entry.get("entry_id") for entry in raw
    )


def matches(roll: SavedRoll, query: str) -> bool:
    """Case-insensitive name match, or substring of the stored OD / ID."""
    q = query.strip().lower()
    if not q:
        return True
    return (
        q in (roll.name or "").lower()
        or q in format_number(roll.od)
        or q in format_number(roll.id)
    )


class HistoryStore:
    """CRUD + search over saved rolls. Every mutation is written back immediately."""

    def __init__(self, store: Optional[PersistenceAdapter] = None,
                 rolls: Optional[List[SavedRoll]] = None,
                 clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock
        self._rolls: List[SavedRoll] = list(rolls or [])

    @classmethod
    def load(cls, store: Optional[PersistenceAdapter], clock: Callable[[], int] = now_ms) -> "HistoryStore":
        if store is None:
            return cls(None, clock=clock)
        rolls = store.load(HISTORY_KEY, [], List[SavedRoll])
        history = cls(store, rolls, clock=clock)
        if rolls and _missing_ids(store.load(HISTORY_KEY, [])):
            # Ids handed out just now must survive to the next load
            logger.info("Assigned ids to %d saved rolls from an older format", len(rolls))
            history._persist()
        return history

    @property
    def rolls(self) -> Tuple[SavedRoll, ...]:
        return tuple(self._rolls)

    def __len__(self):
        return len(self._rolls)

    def get(self, entry_id: str) -> Optional[SavedRoll]:
        return next((r for r in self._rolls if r.entry_id == entry_id), None)

    def save(self, name: Optional[str], inputs: RollInputs, result: CalcResult) -> Optional[SavedRoll]:
        """
        Snapshot a valid calculation. Invalid results are dropped without
        touching the list and None is returned.
        """
        if not isinstance(result, CalcValid):
            logger.info("Not saving roll %r: calculation is invalid", name)
            return None

        name = (name or "").strip() or f"Roll {len(self._rolls) + 1}"
        roll = SavedRoll(
            name=name,
            unit=inputs.unit,
            od=round_to(inputs.od, DIAMETER_DECIMALS),
            id=round_to(inputs.id, DIAMETER_DECIMALS),
            thickness=round_to(inputs.thickness, THICKNESS_IN_DECIMALS),
            saved_at=self.clock(),
            length_in=round_to(result.length_in, LENGTH_DECIMALS),
            length_ft=round_to(result.length_ft, LENGTH_DECIMALS),
            length_m=round_to(result.length_m, LENGTH_DECIMALS),
            length_yd=round_to(result.length_yd, LENGTH_DECIMALS),
        )
        self._rolls.insert(0, roll)
        logger.info("Saved roll %r (%s ft)", roll.name, roll.length_ft)
        self._persist()
        return roll

    def remove(self, saved_at: int) -> Optional[SavedRoll]:
        """Delete the first roll saved at `saved_at`. Returns it, or None if absent."""
        for i, roll in enumerate(self._rolls):
            if roll.saved_at == saved_at:
                del self._rolls[i]
                logger.info("Removed roll %r", roll.name)
                self._persist()
                return roll
        return None

    def remove_by_id(self, entry_id: str) -> Optional[SavedRoll]:
        for i, roll in enumerate(self._rolls):
            if roll.entry_id == entry_id:
                del self._rolls[i]
                logger.info("Removed roll %r", roll.name)
                self._persist()
                return roll
        return None

    def clear(self):
        """Drop every saved roll. Irreversible."""
        count = len(self._rolls)
        self._rolls = []
        logger.info("Cleared %d saved rolls", count)
        self._persist()

    def search(self, query: Optional[str]) -> List[SavedRoll]:
        if not query or not query.strip():
            return list(self._rolls)
        return [r for r in self._rolls if matches(r, query)]

    def _persist(self):
        if self.store is not None:
            self.store.save(HISTORY_KEY, self._rolls)
