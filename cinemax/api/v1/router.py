from fastapi import APIRouter

# Public
from cinemax.api.v1.public.screenings import router as public_screenings_router

# Admin
from cinemax.api.v1.admin.screenings import router as screenings_router
from cinemax.api.v1.admin.halls import hall_schedule_router

api_router = APIRouter()

# --- Public ---
api_router.include_router(public_screenings_router)

# --- Admin ---
api_router.include_router(screenings_router)
api_router.include_router(hall_schedule_router)
