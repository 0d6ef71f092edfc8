"""API Routes module"""
from fastapi import APIRouter

from .requests import crud_router, actions_router

# Main API router
api_router = APIRouter()

api_router.include_router(crud_router, prefix="/requests", tags=["Requests"])
api_router.include_router(actions_router, prefix="/requests", tags=["Request Actions"])

__all__ = ["api_router"]
