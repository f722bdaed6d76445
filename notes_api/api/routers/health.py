"""Health (sin auth): estado del proceso y de la conexión a Mongo."""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from notes_api.api.deps import get_mongo
from notes_api.api.schemas.health import HealthOut
from notes_api.infrastructure.db.mongo import MongoConnection


router = APIRouter(tags=["Health"])  # no prefix to keep paths stable


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthOut, summary="Salud básica")
async def health(mongo: MongoConnection = Depends(get_mongo)) -> HealthOut:
    connected = await mongo.ping()
    return HealthOut(
        database="connected" if connected else "disconnected",
        timestamp=datetime.now(timezone.utc),
    )
