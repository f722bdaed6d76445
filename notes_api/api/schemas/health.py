"""Schemas para el endpoint de health."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class HealthOut(BaseModel):
    status: Literal["ok"] = "ok"
    database: Literal["connected", "disconnected"]
    timestamp: datetime
