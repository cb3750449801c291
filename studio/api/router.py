from fastapi import APIRouter

from studio.api.routes import admin_auth, availability, bookings, packages

api_router = APIRouter()

# Public reads and booking requests, admin writes are guarded per endpoint
api_router.include_router(admin_auth.router)
api_router.include_router(availability.router)
api_router.include_router(bookings.router)
api_router.include_router(packages.router)
