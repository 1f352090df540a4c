from fastapi import APIRouter

from countapp.api.v1.endpoints import auth, surveys, results, presets, users, health

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(surveys.router)
api_router.include_router(results.router)
api_router.include_router(presets.router)
api_router.include_router(users.router)
