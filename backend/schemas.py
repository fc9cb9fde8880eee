from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Union
import uuid
from .models import Unit, ThemeMode


# --- Core snapshots (immutable; replaced, never edited in place) ---

class ThicknessPreset(BaseModel):
    name: str
    thickness_in: float  # canonical storage unit, whatever unit the UI shows
    class Config:
        frozen = True


class RollInputs(BaseModel):
    """OD / ID / thickness as entered, all in `unit`."""
    od: float
    id: float
    thickness: float
    unit: Unit = Unit.INCH
    class Config:
        frozen = True


class SavedRoll(BaseModel):
    """Point-in-time snapshot. od/id/thickness stay in the unit active at save time."""
    entry_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    unit: Unit
    od: float
    id: float
    thickness: float
    saved_at: int  # epoch milliseconds
    length_in: float
    length_ft: float
    length_m: float
    length_yd: float
    class Config:
        frozen = True


# --- Calculation result: exactly one of the two variants ---

class CalcInvalid(BaseModel):
    valid: Literal[False] = False
    message: str
    class Config:
        frozen = True


class CalcValid(BaseModel):
    valid: Literal[True] = True
    length_in: float
    length_ft: float
    length_m: float
    length_yd: float
    class Config:
        frozen = True


CalcResult = Union[CalcValid, CalcInvalid]


# --- API request/response bodies ---

class InputsUpdate(BaseModel):
    od: Optional[float] = None
    id: Optional[float] = None
    thickness: Optional[float] = None


class UnitChange(BaseModel):
    unit: Unit


class ThemeUpdate(BaseModel):
    theme: ThemeMode


class LogoUpdate(BaseModel):
    logo_url: Optional[str] = None


class WorkingState(BaseModel):
    unit: Unit
    theme: ThemeMode
    logo_url: Optional[str] = None
    inputs: RollInputs
    result: CalcResult


class PresetCreate(BaseModel):
    name: str = ""
    value: Union[float, str]  # raw entry in the active unit; validated by the registry


class PresetView(BaseModel):
    index: int
    name: str
    thickness_in: float
    display: str  # stored value rendered in the active unit


class PresetApplied(BaseModel):
    thickness: float
    unit: Unit


class RollSave(BaseModel):
    name: Optional[str] = None
    inputs: Optional[RollInputs] = None  # omitted -> current working inputs


class HistoryList(BaseModel):
    query: str = ""
    count: int
    rolls: List[SavedRoll]
