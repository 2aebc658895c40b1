"""Pydantic schema for the health endpoint."""

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    data_source: str
    timestamp: datetime
