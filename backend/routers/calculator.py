from fastapi import APIRouter, Depends

from .. import schemas
from ..calculators.roll_length import compute_inputs
from ..state import CalculatorState, get_state

router = APIRouter(tags=["calculator"])


def _working_state(state: CalculatorState) -> schemas.WorkingState:
    return schemas.WorkingState(
        unit=state.unit,
        theme=state.theme,
        logo_url=state.logo_url,
        inputs=state.inputs,
        result=state.result(),
    )


@router.post("/calculate", response_model=schemas.CalcResult)
def calculate(inputs: schemas.RollInputs):
    """Stateless calculation. Invalid geometry comes back as {valid: false, message}, not an error."""
    return compute_inputs(inputs)


@router.get("/state", response_model=schemas.WorkingState)
def get_working_state(state: CalculatorState = Depends(get_state)):
    return _working_state(state)


@router.get("/state/result", response_model=schemas.CalcResult)
def get_live_result(state: CalculatorState = Depends(get_state)):
    return state.result()


@router.put("/state/inputs", response_model=schemas.WorkingState)
def update_inputs(update: schemas.InputsUpdate, state: CalculatorState = Depends(get_state)):
    state.set_inputs(**update.model_dump(exclude_unset=True))
    return _working_state(state)


@router.post("/state/unit", response_model=schemas.WorkingState)
def change_unit(change: schemas.UnitChange, state: CalculatorState = Depends(get_state)):
    """Switch in <-> mm, converting the working inputs."""
    state.toggle_unit(change.unit)
    return _working_state(state)


@router.put("/state/theme", response_model=schemas.WorkingState)
def update_theme(update: schemas.ThemeUpdate, state: CalculatorState = Depends(get_state)):
    state.set_theme(update.theme)
    return _working_state(state)


@router.put("/state/logo", response_model=schemas.WorkingState)
def update_logo(update: schemas.LogoUpdate, state: CalculatorState = Depends(get_state)):
    state.set_logo(update.logo_url)
    return _working_state(state)


@router.get("/state/theme", response_model=schemas.ThemeUpdate)
def get_theme(state: CalculatorState = Depends(get_state)):
    return schemas.ThemeUpdate(theme=state.theme)


@router.get("/state/logo", response_model=schemas.LogoUpdate)
def get_logo(state: CalculatorState = Depends(get_state)):
    return schemas.LogoUpdate(logo_url=state.logo_url)
