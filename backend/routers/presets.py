from fastapi import APIRouter, Depends, HTTPException
from typing import List

from .. import schemas
from ..presets import display_thickness
from ..state import CalculatorState, get_state

router = APIRouter(prefix="/presets", tags=["presets"])


def _preset_views(state: CalculatorState) -> List[schemas.PresetView]:
    return [
        schemas.PresetView(
            index=i,
            name=p.name,
            thickness_in=p.thickness_in,
            display=display_thickness(p, state.unit),
        )
        for i, p in enumerate(state.presets.presets)
    ]


@router.get("/", response_model=List[schemas.PresetView])
def list_presets(state: CalculatorState = Depends(get_state)):
    return _preset_views(state)


@router.post("/", response_model=List[schemas.PresetView])
def add_preset(preset: schemas.PresetCreate, state: CalculatorState = Depends(get_state)):
    """Add a thickness in the active unit. Zero, negative or non-numeric values are ignored."""
    state.add_preset(preset.name, preset.value)
    return _preset_views(state)


@router.delete("/{index}", response_model=List[schemas.PresetView])
def remove_preset(index: int, state: CalculatorState = Depends(get_state)):
    if not state.presets.remove(index):
        raise HTTPException(status_code=404, detail="Preset not found")
    return _preset_views(state)


@router.post("/{index}/apply", response_model=schemas.PresetApplied)
def apply_preset(index: int, state: CalculatorState = Depends(get_state)):
    """Set the working thickness from a preset, converted to the active unit."""
    thickness = state.apply_preset(index)
    if thickness is None:
        raise HTTPException(status_code=404, detail="Preset not found")
    return schemas.PresetApplied(thickness=thickness, unit=state.unit)


@router.post("/reset", response_model=List[schemas.PresetView])
def reset_presets(state: CalculatorState = Depends(get_state)):
    state.presets.reset()
    return _preset_views(state)
