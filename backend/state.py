"""
Calculator state container.

Holds everything a client session works with: the active unit, the working
OD / ID / thickness, theme, logo, the preset registry and the saved-roll
history. Each value loads from its own key with its own default and is
written back after every change. With no store (or a failing one) the
container works the same, just without durability.
"""

import logging
from typing import Callable, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from .calculators.roll_length import compute_inputs
from .database import get_db
from .history import HistoryStore, now_ms
from .models import ThemeMode, Unit
from .persistence import PersistenceAdapter
from .presets import PresetRegistry
from .schemas import CalcResult, RollInputs, SavedRoll
from .units import (
    DIAMETER_DECIMALS,
    IN_PER_MM,
    convert_diameter,
    convert_thickness,
    round_to,
)

logger = logging.getLogger(__name__)

UNIT_KEY = "unit"
THEME_KEY = "theme"
OD_KEY = "od"
ID_KEY = "id"
THICKNESS_KEY = "thickness"
LOGO_KEY = "logoUrl"

DEFAULT_OD = 6.0
DEFAULT_CORE_MM = 85.0  # standard 3" cardboard core is 85 mm outside
DEFAULT_THICKNESS_IN = 0.003
DEFAULT_THICKNESS_MM = 0.076


def default_inputs(unit) -> RollInputs:
    unit = Unit(unit)
    if unit == Unit.MILLIMETER:
        core, thickness = DEFAULT_CORE_MM, DEFAULT_THICKNESS_MM
    else:
        core, thickness = round_to(DEFAULT_CORE_MM * IN_PER_MM, DIAMETER_DECIMALS), DEFAULT_THICKNESS_IN
    return RollInputs(od=DEFAULT_OD, id=core, thickness=thickness, unit=unit)


def toggle_inputs(inputs: RollInputs, next_unit) -> RollInputs:
    """Convert working inputs to `next_unit` with toggle rounding. Same unit -> unchanged."""
    next_unit = Unit(next_unit)
    if next_unit == inputs.unit:
        return inputs
    return RollInputs(
        od=convert_diameter(inputs.od, inputs.unit, next_unit),
        id=convert_diameter(inputs.id, inputs.unit, next_unit),
        thickness=convert_thickness(inputs.thickness, inputs.unit, next_unit),
        unit=next_unit,
    )


class CalculatorState:

    def __init__(self, store: Optional[PersistenceAdapter] = None, clock: Callable[[], int] = now_ms):
        self.store = store
        self.unit: Unit = self._load(UNIT_KEY, Unit.INCH, Unit)
        self.theme: ThemeMode = self._load(THEME_KEY, ThemeMode.AUTO, ThemeMode)
        self.logo_url: Optional[str] = self._load(LOGO_KEY, None, Optional[str])

        defaults = default_inputs(self.unit)
        self.inputs = RollInputs(
            od=self._load(OD_KEY, defaults.od, float),
            id=self._load(ID_KEY, defaults.id, float),
            thickness=self._load(THICKNESS_KEY, defaults.thickness, float),
            unit=self.unit,
        )

        self.presets = PresetRegistry.load(store)
        self.history = HistoryStore.load(store, clock=clock)

    # --- working inputs ---

    def result(self) -> CalcResult:
        """Live, unrounded calculation for the working inputs."""
        return compute_inputs(self.inputs)

    def set_inputs(self, od: Optional[float] = None, id: Optional[float] = None,
                   thickness: Optional[float] = None) -> RollInputs:
        changes = {k: v for k, v in (("od", od), ("id", id), ("thickness", thickness)) if v is not None}
        if changes:
            self.inputs = self.inputs.model_copy(update=changes)
            self._persist_inputs(*changes.keys())
        return self.inputs

    def toggle_unit(self, next_unit) -> RollInputs:
        next_unit = Unit(next_unit)
        if next_unit == self.unit:
            return self.inputs
        self.inputs = toggle_inputs(self.inputs, next_unit)
        self.unit = next_unit
        logger.info("Switched unit to %s", next_unit.value)
        self._save(UNIT_KEY, self.unit)
        self._persist_inputs("od", "id", "thickness")
        return self.inputs

    # --- presets ---

    def apply_preset(self, index: int) -> Optional[float]:
        """Put preset `index` into the thickness field. None if there's no such preset."""
        preset = self.presets.get(index)
        if preset is None:
            return None
        thickness = self.presets.apply(preset, self.unit)
        self.set_inputs(thickness=thickness)
        return thickness

    def add_preset(self, name: str, raw_value):
        return self.presets.add(name, raw_value, self.unit)

    # --- history ---

    def save_roll(self, name: Optional[str] = None, inputs: Optional[RollInputs] = None) -> Optional[SavedRoll]:
        inputs = inputs or self.inputs
        return self.history.save(name, inputs, compute_inputs(inputs))

    def load_roll(self, entry_id: str) -> Optional[RollInputs]:
        """
        Load a saved roll back into the working inputs. Switches the active
        unit to the roll's unit first, then takes its stored values as-is.
        """
        roll = self.history.get(entry_id)
        if roll is None:
            return None
        if roll.unit != self.unit:
            self.toggle_unit(roll.unit)
        return self.set_inputs(od=roll.od, id=roll.id, thickness=roll.thickness)

    # --- preferences ---

    def set_theme(self, theme) -> ThemeMode:
        self.theme = ThemeMode(theme)
        self._save(THEME_KEY, self.theme)
        return self.theme

    def set_logo(self, logo_url: Optional[str]) -> Optional[str]:
        self.logo_url = logo_url or None
        self._save(LOGO_KEY, self.logo_url)
        return self.logo_url

    # --- storage ---

    def _load(self, name, fallback, type_):
        if self.store is None:
            return fallback
        return self.store.load(name, fallback, type_)

    def _save(self, name, value):
        if self.store is not None:
            self.store.save(name, value)

    def _persist_inputs(self, *fields):
        keys = {"od": OD_KEY, "id": ID_KEY, "thickness": THICKNESS_KEY}
        for field in fields:
            self._save(keys[field], getattr(self.inputs, field))


def get_state(db: Session = Depends(get_db)) -> CalculatorState:
    """FastAPI dependency: the calculator state, loaded from this request's session."""
    return CalculatorState(PersistenceAdapter(db))
