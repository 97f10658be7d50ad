"""
API v1 router setup
Organized into: public (booking link) and dashboard (JWT) routes
"""
from fastapi import APIRouter

from appointly.api.v1.dashboard import appointments, availability, booking_form
from appointly.api.v1.public import booking

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(
    booking.router,
    prefix="/public",
    tags=["Public"]
)

# ============================================================================
# DASHBOARD ROUTES (JWT authentication required)
# ============================================================================
api_v1_router.include_router(
    availability.router,
    tags=["Dashboard"]
)

api_v1_router.include_router(
    appointments.router,
    tags=["Dashboard"]
)

api_v1_router.include_router(
    booking_form.router,
    tags=["Dashboard"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "authentication": {
            "public": "No authentication required",
            "dashboard": "JWT Bearer token required (provider login)",
        }
    }
