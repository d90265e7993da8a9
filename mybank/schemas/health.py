"""Schema for the /health probe."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Process is up; database says whether a SELECT 1 got through."""

    status: Literal["ok"] = "ok"
    environment: str = Field(description="APP_ENV the process was started with")
    database: Literal["connected", "disconnected"]
