"""
FastAPI Dependencies.

`Annotated[..., Depends(...)]` aliases for the objects the lifespan puts into
app.state. Route handlers declare what they need:

    @router.get("/records")
    async def records(livingapps: LivingAppsServiceDep):
        return await livingapps.get_records(app_id)
"""

from typing import Annotated

from fastapi import Depends, Request

from core.http_client import get_livingapps_service_from_app
from core.livingapps import LivingAppsService


def get_livingapps_service(request: Request) -> LivingAppsService:
    """The LivingAppsService bound to the shared client."""
    return get_livingapps_service_from_app(request.app)


LivingAppsServiceDep = Annotated[LivingAppsService, Depends(get_livingapps_service)]
