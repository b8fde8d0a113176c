"""Health (sin auth), salidas tipadas y estables."""
from fastapi import APIRouter, status

from app.infrastructure.db.mongo import db_ready
from app.api.schemas.health import HealthOut, DbHealthOut


router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", status_code=status.HTTP_200_OK, response_model=HealthOut, summary="Salud básica")
def health() -> HealthOut:
    return HealthOut(status="ok", message="Server is running")


@router.get("/db", status_code=status.HTTP_200_OK, response_model=DbHealthOut, summary="Estado de Mongo")
def health_db() -> DbHealthOut:
    ready = db_ready()
    return DbHealthOut(status="ok" if ready else "degraded", mongo=ready)
