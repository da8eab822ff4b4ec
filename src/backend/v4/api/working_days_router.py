"""Working Days API Router.

Exposes the working-day calculator as workflow-style operations:
- getStats: day/week/month/year statistics around a reference date
- calculateRange: statistics for an explicit date range

Items are processed independently; with `continue_on_fail` a failing item is
replaced by an `{"error": ...}` record instead of failing the whole request.
"""

import logging
from datetime import datetime
from functools import lru_cache
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.backend.common.config.app_config import config
from src.backend.v4.integrations.feiertage_client import (
    GERMAN_STATES,
    FeiertageClient,
    HolidaySourceError,
)
from src.backend.v4.use_cases.calendar_dates import DEFAULT_WORKING_DAYS, parse_datetime
from src.backend.v4.use_cases.working_days_report import (
    InvalidWindowError,
    compute_multi_period_report,
    compute_range_report,
)

logger = logging.getLogger(__name__)

working_days_router = APIRouter(prefix="/working-days", tags=["Working Days"])

Weekday = Literal[
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"
]


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------


class WorkingDaysParameters(BaseModel):
    operation: Literal["getStats", "calculateRange"] = "getStats"
    reference_date: str | None = None
    from_date: str | None = None
    to_date: str | None = None
    state: str = "be"
    working_days: list[Weekday] = Field(default_factory=lambda: list(DEFAULT_WORKING_DAYS))
    include_breakdown: bool = True
    strict_range: bool = False


class WorkingDaysExecuteRequest(BaseModel):
    items: list[WorkingDaysParameters] = Field(default_factory=list)
    continue_on_fail: bool = False


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_holiday_client() -> FeiertageClient:
    """Process-wide holiday client; its cache is shared by every request."""

    return FeiertageClient.from_env()


# ---------------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------------


def _parse_param_date(value: str | None, field_name: str) -> datetime:
    if not value:
        raise ValueError(f"{field_name} is required")
    try:
        return parse_datetime(value, config.get_timezone())
    except ValueError as e:
        raise ValueError(f"{field_name} must be an ISO date (YYYY-MM-DD): {value!r}") from e


def _get_stats(params: WorkingDaysParameters, client: FeiertageClient) -> dict[str, Any]:
    if params.reference_date:
        reference_date = _parse_param_date(params.reference_date, "reference_date")
    else:
        reference_date = datetime.now(config.get_timezone())

    report = compute_multi_period_report(
        reference_date,
        params.state,
        params.working_days,
        holiday_client=client,
    )
    return {
        "operation": "getStats",
        "referenceDate": reference_date.isoformat(),
        "state": params.state,
        "workingDays": list(params.working_days),
        "statistics": report.to_dict(params.include_breakdown),
    }


def _calculate_range(params: WorkingDaysParameters, client: FeiertageClient) -> dict[str, Any]:
    from_date = _parse_param_date(params.from_date, "from_date")
    to_date = _parse_param_date(params.to_date, "to_date")

    report = compute_range_report(
        from_date,
        to_date,
        params.state,
        params.working_days,
        holiday_client=client,
        strict=params.strict_range,
    )
    return {
        "operation": "calculateRange",
        "fromDate": from_date.isoformat(),
        "toDate": to_date.isoformat(),
        "state": params.state,
        "workingDays": list(params.working_days),
        "statistics": report.to_dict(params.include_breakdown),
    }


def run_operation(params: WorkingDaysParameters, client: FeiertageClient) -> dict[str, Any]:
    if params.operation == "getStats":
        return _get_stats(params, client)
    return _calculate_range(params, client)


def _to_http_exception(err: Exception) -> HTTPException:
    if isinstance(err, HolidaySourceError):
        return HTTPException(status_code=502, detail=str(err))
    return HTTPException(status_code=400, detail=str(err))


def _run_single(params: WorkingDaysParameters, client: FeiertageClient) -> dict[str, Any]:
    try:
        return run_operation(params, client)
    except (HolidaySourceError, InvalidWindowError, ValueError) as e:
        logger.warning("Working days %s failed: %s", params.operation, e)
        raise _to_http_exception(e)
    except Exception as e:
        logger.exception("Working days %s failed unexpectedly", params.operation)
        raise HTTPException(status_code=500, detail=str(e))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@working_days_router.get("/states")
def list_states():
    """German states accepted as `state` (name -> API code)."""

    return {
        "states": [{"name": name, "value": code} for name, code in GERMAN_STATES.items()]
    }


@working_days_router.post("/execute")
def execute(
    body: WorkingDaysExecuteRequest,
    client: FeiertageClient = Depends(get_holiday_client),
):
    """Run every item in order and return one result per item."""

    results: list[dict[str, Any]] = []
    for i, params in enumerate(body.items):
        try:
            results.append(run_operation(params, client))
        except (HolidaySourceError, InvalidWindowError, ValueError) as e:
            if body.continue_on_fail:
                logger.warning("Item %d (%s) failed, continuing: %s", i, params.operation, e)
                results.append({"error": str(e)})
                continue
            logger.error("Item %d (%s) failed: %s", i, params.operation, e)
            raise _to_http_exception(e)
        except Exception as e:
            if body.continue_on_fail:
                logger.warning("Item %d (%s) failed, continuing: %s", i, params.operation, e)
                results.append({"error": str(e)})
                continue
            logger.exception("Item %d (%s) failed unexpectedly", i, params.operation)
            raise HTTPException(status_code=500, detail=str(e))

    logger.info("Working days execute completed: %d items", len(results))
    return {"items": results}


@working_days_router.post("/stats")
def get_stats(
    body: WorkingDaysParameters,
    client: FeiertageClient = Depends(get_holiday_client),
):
    return _run_single(body.model_copy(update={"operation": "getStats"}), client)


@working_days_router.post("/range")
def calculate_range(
    body: WorkingDaysParameters,
    client: FeiertageClient = Depends(get_holiday_client),
):
    return _run_single(body.model_copy(update={"operation": "calculateRange"}), client)
