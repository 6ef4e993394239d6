from datetime import datetime, timezone
from typing import Any, Dict
from pydantic import BaseModel, ConfigDict, Field


#       BASE MODELS
# -------------------------


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(str_strip_whitespace=True)


#           HEALTH
# ---------------------------


class HealthResponse(BaseSchema):
    """Health check response."""

    status: str = "healthy"
    version: str
    environment: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class DetailedHealthResponse(HealthResponse):
    """Detailed health check with component status."""

    components: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
