from fastapi import APIRouter
from quithero.api.v1.routes import auth
from .profile import router as profile_router
from .cravings import router as cravings_router
from .progress import router as progress_router
from .achievements import router as achievements_router
from .sessions import router as sessions_router


api_router = APIRouter()

api_router.include_router(auth.router, tags=["auth"])

api_router.include_router(profile_router)
api_router.include_router(cravings_router)
api_router.include_router(progress_router)
api_router.include_router(achievements_router)
api_router.include_router(sessions_router)
