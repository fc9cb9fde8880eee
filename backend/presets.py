"""
Named material thicknesses.

Presets are stored in inches no matter which unit the user is working in,
so a preset added in mm still applies correctly after switching to inches.
The list is insertion-ordered with the newest first. Names may repeat.
"""

import logging
import math
from typing import List, Optional, Tuple

from .models import Unit
from .persistence import PersistenceAdapter
from .schemas import ThicknessPreset
from .units import (
    IN_PER_MM,
    MM_PER_IN,
    PRESET_IN_DECIMALS,
    PRESET_MM_DECIMALS,
    format_decimal,
    round_to,
    to_inches,
)

logger = logging.getLogger(__name__)

PRESETS_KEY = "presets"

# 1 mil = 0.001"
DEFAULT_PRESETS: Tuple[ThicknessPreset, ...] = (
    ThicknessPreset(name="Calendared 3 mil", thickness_in=0.003),
    ThicknessPreset(name="Cast 2 mil", thickness_in=0.002),
    ThicknessPreset(name="Laminate 1.5 mil", thickness_in=0.0015),
    ThicknessPreset(name="100 μm film", thickness_in=0.1 * IN_PER_MM),
)


def apply_preset(preset: ThicknessPreset, active_unit) -> float:
    """Preset thickness in the active unit, rounded for the thickness field."""
    if Unit(active_unit) == Unit.MILLIMETER:
        return round_to(preset.thickness_in * MM_PER_IN, PRESET_MM_DECIMALS)
    return round_to(preset.thickness_in, PRESET_IN_DECIMALS)


def display_thickness(preset: ThicknessPreset, active_unit) -> str:
    """e.g. '0.051 mm' or '0.002 in'."""
    unit = Unit(active_unit)
    if unit == Unit.MILLIMETER:
        return f"{format_decimal(preset.thickness_in * MM_PER_IN, 3)} {unit.value}"
    return f"{format_decimal(preset.thickness_in, 5)} {unit.value}"


def _parse_thickness(raw_value) -> Optional[float]:
    if isinstance(raw_value, str):
        raw_value = raw_value.strip()
        if not raw_value:
            return None
    try:
        return float(raw_value)
    except (TypeError, ValueError):
        return None


class PresetRegistry:
    """CRUD over the preset list. Every mutation is written back immediately."""

    def __init__(self, store: Optional[PersistenceAdapter] = None,
                 presets: Optional[List[ThicknessPreset]] = None):
        self.store = store
        self._presets: List[ThicknessPreset] = list(presets if presets is not None else DEFAULT_PRESETS)

    @classmethod
    def load(cls, store: Optional[PersistenceAdapter]) -> "PresetRegistry":
        """Seed from storage; the built-in presets stand in when nothing usable is stored."""
        if store is None:
            return cls(None)
        presets = store.load(PRESETS_KEY, list(DEFAULT_PRESETS), List[ThicknessPreset])
        return cls(store, presets)

    @property
    def presets(self) -> Tuple[ThicknessPreset, ...]:
        return tuple(self._presets)

    def __len__(self):
        return len(self._presets)

    def get(self, index: int) -> Optional[ThicknessPreset]:
        if 0 <= index < len(self._presets):
            return self._presets[index]
        return None

    def add(self, name: str, raw_value, active_unit) -> Optional[ThicknessPreset]:
        """
        Add a preset entered in the active unit. Returns the new preset, or
        None when the value is not a finite positive number (silently ignored).
        """
        value = _parse_thickness(raw_value)
        if value is None:
            logger.debug("Ignoring preset with unparseable value %r", raw_value)
            return None

        unit = Unit(active_unit)
        t_in = to_inches(value, unit)
        if not math.isfinite(t_in) or t_in <= 0:
            logger.debug("Ignoring preset with non-positive thickness %r %s", raw_value, unit.value)
            return None

        if not name or not name.strip():
            shown = t_in * MM_PER_IN if unit == Unit.MILLIMETER else t_in
            name = f"{format_decimal(shown, 3)} {unit.value}"

        preset = ThicknessPreset(name=name, thickness_in=t_in)
        self._presets.insert(0, preset)
        logger.info("Added thickness preset %r (%.6f in)", preset.name, t_in)
        self._persist()
        return preset

    def remove(self, index: int) -> bool:
        """Remove by position. Out-of-range indexes are a no-op returning False."""
        if not 0 <= index < len(self._presets):
            return False
        removed = self._presets.pop(index)
        logger.info("Removed thickness preset %r", removed.name)
        self._persist()
        return True

    def apply(self, preset: ThicknessPreset, active_unit) -> float:
        return apply_preset(preset, active_unit)

    def reset(self):
        """Back to the built-in list."""
        self._presets = list(DEFAULT_PRESETS)
        self._persist()

    def _persist(self):
        if self.store is not None:
            self.store.save(PRESETS_KEY, self._presets)
