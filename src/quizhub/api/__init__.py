"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Authorization is applied once, at the aggregate router, using
FastAPI's dependencies parameter. enforce_route_policy runs after routing
has picked an endpoint and before the handler, and consults the route
table in quizhub.auth.policy — so even the open routes (health, login,
register) are open because the table says so, not because they skipped
the check.
"""

from fastapi import APIRouter, Depends

from quizhub.api.admin import router as admin_router
from quizhub.api.auth import router as auth_router
from quizhub.api.health import router as health_router
from quizhub.api.participant import router as participant_router
from quizhub.auth.dependencies import enforce_route_policy

api_router = APIRouter(prefix="/api", dependencies=[Depends(enforce_route_policy)])

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(admin_router, tags=["admin"])
api_router.include_router(participant_router, tags=["participant"])
