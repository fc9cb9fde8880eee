from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from typing import Optional

from .. import schemas
from ..calculators.roll_length import INVALID_GEOMETRY_MESSAGE
from ..csv_export import csv_filename, export_csv
from ..state import CalculatorState, get_state

router = APIRouter(prefix="/history", tags=["history"])


@router.get("/", response_model=schemas.HistoryList)
def list_rolls(q: Optional[str] = Query(None), state: CalculatorState = Depends(get_state)):
    """Saved rolls, newest first. ?q= filters on name, OD or ID."""
    rolls = state.history.search(q)
    return schemas.HistoryList(query=q or "", count=len(rolls), rolls=rolls)


@router.post("/", response_model=schemas.SavedRoll)
def save_roll(body: schemas.RollSave, state: CalculatorState = Depends(get_state)):
    """Save the working inputs (or the inputs given) as a roll."""
    roll = state.save_roll(body.name, body.inputs)
    if roll is None:
        raise HTTPException(status_code=422, detail=INVALID_GEOMETRY_MESSAGE)
    return roll


@router.get("/export.csv")
def export_rolls(state: CalculatorState = Depends(get_state)):
    """Whole history as CSV, in history order. Search filters don't apply."""
    filename = csv_filename()
    return Response(
        content=export_csv(state.history.rolls),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/", response_model=schemas.HistoryList)
def clear_rolls(state: CalculatorState = Depends(get_state)):
    state.history.clear()
    return schemas.HistoryList(count=0, rolls=[])


@router.delete("/by-id/{entry_id}", response_model=schemas.SavedRoll)
def remove_roll_by_id(entry_id: str, state: CalculatorState = Depends(get_state)):
    roll = state.history.remove_by_id(entry_id)
    if roll is None:
        raise HTTPException(status_code=404, detail="Saved roll not found")
    return roll


@router.delete("/{saved_at}", response_model=schemas.SavedRoll)
def remove_roll(saved_at: int, state: CalculatorState = Depends(get_state)):
    """Delete the first roll saved at this timestamp (epoch ms)."""
    roll = state.history.remove(saved_at)
    if roll is None:
        raise HTTPException(status_code=404, detail="Saved roll not found")
    return roll


@router.post("/{entry_id}/load", response_model=schemas.RollInputs)
def load_roll(entry_id: str, state: CalculatorState = Depends(get_state)):
    """Copy a saved roll's OD / ID / thickness (and unit) into the working inputs."""
    inputs = state.load_roll(entry_id)
    if inputs is None:
        raise HTTPException(status_code=404, detail="Saved roll not found")
    return inputs
