from fastapi import APIRouter

from practice.api.endpoints.coach import coach_router
from practice.api.endpoints.practice import practice_router
from practice.api.endpoints.processes import processes_router

api_router = APIRouter()

api_router.include_router(practice_router, prefix="/practice", tags=["practice"])
api_router.include_router(coach_router, prefix="/interview", tags=["coach"])
api_router.include_router(processes_router, prefix="/processes", tags=["processes"])
