from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response

from practice.api.deps import get_client
from practice.clients.career_api import CareerAPIClient

processes_router = APIRouter()


@processes_router.get("/{process_id}")
async def get_process(process_id: int, client: CareerAPIClient = Depends(get_client)):
    return await client.get_process(process_id)


@processes_router.put("/{process_id}")
async def update_process(
    process_id: int,
    changes: Dict[str, Any] = Body(...),
    client: CareerAPIClient = Depends(get_client),
):
    return await client.update_process(process_id, changes)


@processes_router.get("/{process_id}/stages")
async def list_stages(process_id: int, client: CareerAPIClient = Depends(get_client)):
    return await client.list_stages(process_id)


@processes_router.post("/{process_id}/stages", status_code=201)
async def add_stage(
    process_id: int,
    stage: Dict[str, Any] = Body(...),
    client: CareerAPIClient = Depends(get_client),
):
    return await client.add_stage(process_id, stage)


@processes_router.put("/stages/{stage_id}")
async def update_stage(
    stage_id: int,
    changes: Dict[str, Any] = Body(...),
    client: CareerAPIClient = Depends(get_client),
):
    return await client.update_stage(stage_id, changes)


@processes_router.delete("/stages/{stage_id}", status_code=204)
async def delete_stage(stage_id: int, client: CareerAPIClient = Depends(get_client)):
    await client.delete_stage(stage_id)
    return Response(status_code=204)


@processes_router.get("/{process_id}/followups")
async def list_followups(process_id: int, client: CareerAPIClient = Depends(get_client)):
    return await client.list_followups(process_id)


@processes_router.post("/{process_id}/followups", status_code=201)
async def add_followup(
    process_id: int,
    followup: Dict[str, Any] = Body(...),
    client: CareerAPIClient = Depends(get_client),
):
    return await client.add_followup(process_id, followup)


@processes_router.put("/followups/{followup_id}/complete")
async def complete_followup(followup_id: int, client: CareerAPIClient = Depends(get_client)):
    return await client.set_followup_completed(followup_id, True)


@processes_router.put("/followups/{followup_id}/uncomplete")
async def uncomplete_followup(followup_id: int, client: CareerAPIClient = Depends(get_client)):
    return await client.set_followup_completed(followup_id, False)
