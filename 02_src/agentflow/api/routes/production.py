"""Production data API routes."""

from datetime import date

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ...analysis.analysts import DEFAULT_TREND_MONTHS, MAX_TREND_MONTHS, months_before
from ...app import IApplication
from ...logging_config import get_logger

logger = get_logger(__name__)


class ProductionRecordResponse(BaseModel):
    """Response model for a production record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int | None
    date: date
    production_volume: int
    machine_id: str
    downtime_minutes: int
    failure_type: str | None
    operator_id: str | None
    operator_skill: str | None
    raw_material_status: str | None
    delay_minutes: int
    defective_bottles: int
    rejection_reason: str | None
    temperature: float | None
    humidity: float | None


def create_production_router(app: IApplication) -> APIRouter:
    """Create production router."""
    router = APIRouter(prefix="/api/production", tags=["production"])

    @router.get("/trends", response_model=list[ProductionRecordResponse])
    async def get_trends(months: int = Query(DEFAULT_TREND_MONTHS, ge=1, le=MAX_TREND_MONTHS)):
        """Production records for the last ``months`` months of recorded data."""
        try:
            anchor = await app.storage.get_latest_production_date()
            if anchor is None:
                return []
            records = await app.storage.get_production_data(
                start=months_before(anchor, months), end=anchor
            )
        except Exception as e:
            logger.error(f"Failed to fetch production trends: {e}", exc_info=True)
            return JSONResponse(
                status_code=500, content={"error": "Failed to fetch production trends"}
            )
        return [
            ProductionRecordResponse(
                id=r.id,
                date=r.date,
                production_volume=r.production_volume,
                machine_id=r.machine_id,
                downtime_minutes=r.downtime_minutes,
                failure_type=r.failure_type,
                operator_id=r.operator_id,
                operator_skill=r.operator_skill,
                raw_material_status=r.raw_material_status,
                delay_minutes=r.delay_minutes,
                defective_bottles=r.defective_bottles,
                rejection_reason=r.rejection_reason,
                temperature=r.temperature,
                humidity=r.humidity,
            )
            for r in records
        ]

    return router
