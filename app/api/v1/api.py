"""API v1 router composition."""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, restaurants

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(restaurants.router, prefix="/restaurants", tags=["restaurants"])
