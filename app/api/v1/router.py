from fastapi import APIRouter
from app.api.v1.endpoints import health, tools, agent

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(tools.router, prefix="/tools", tags=["tools"])
api_router.include_router(agent.router, prefix="/agent", tags=["agent"])
