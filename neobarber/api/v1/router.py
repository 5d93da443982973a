"""Version 1 API routes."""

from fastapi import APIRouter

from neobarber.api.v1 import appointments, health

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
