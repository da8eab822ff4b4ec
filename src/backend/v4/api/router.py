"""Top-level v4 API router.

Feature routers are mounted here; `app.py` includes `app_v4` once.
"""

import logging

from fastapi import APIRouter

from src.backend.v4.api.working_days_router import working_days_router

logger = logging.getLogger(__name__)

app_v4 = APIRouter(
    prefix="/api/v4",
    responses={404: {"description": "Not found"}},
)

app_v4.include_router(working_days_router)
