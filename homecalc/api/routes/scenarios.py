"""Saved scenario routes. Every call is scoped to the caller's user id."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response

from homecalc.api.deps import get_scenario_store, get_user_id
from homecalc.api.schemas import ScenarioCreate, ScenarioResponse, ScenarioUpdate
from homecalc.data.scenario_store import ScenarioStore

router = APIRouter(prefix="/api/scenarios", tags=["scenarios"])


@router.post("", response_model=ScenarioResponse, status_code=201)
async def create_scenario(
    req: ScenarioCreate,
    user_id: str = Depends(get_user_id),
    store: ScenarioStore = Depends(get_scenario_store),
):
    return await store.create(user_id, **req.model_dump())


@router.get("", response_model=list[ScenarioResponse])
async def list_scenarios(
    user_id: str = Depends(get_user_id),
    store: ScenarioStore = Depends(get_scenario_store),
):
    return await store.list(user_id)


@router.get("/{scenario_id}", response_model=ScenarioResponse)
async def get_scenario(
    scenario_id: UUID,
    user_id: str = Depends(get_user_id),
    store: ScenarioStore = Depends(get_scenario_store),
):
    return await store.get(user_id, scenario_id)


@router.patch("/{scenario_id}", response_model=ScenarioResponse)
async def update_scenario(
    scenario_id: UUID,
    req: ScenarioUpdate,
    user_id: str = Depends(get_user_id),
    store: ScenarioStore = Depends(get_scenario_store),
):
    return await store.update(user_id, scenario_id, **req.model_dump(exclude_unset=True))


@router.delete("/{scenario_id}", status_code=204)
async def delete_scenario(
    scenario_id: UUID,
    user_id: str = Depends(get_user_id),
    store: ScenarioStore = Depends(get_scenario_store),
):
    await store.delete(user_id, scenario_id)
    return Response(status_code=204)
