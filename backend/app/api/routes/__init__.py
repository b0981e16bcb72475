"""
API Routes
"""

from fastapi import APIRouter

from .visibility import router as visibility_router

api_router = APIRouter()

api_router.include_router(visibility_router, prefix="/visibility", tags=["MAX Visibility"])
