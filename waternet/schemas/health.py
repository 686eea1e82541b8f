"""Schema for the health check response."""

from typing import Literal

from pydantic import Field

from waternet.schemas.base import ApiModel


class HealthResponse(ApiModel):
    """Liveness plus store connectivity, for load balancers and monitoring."""

    status: Literal["ok"] = "ok"
    service: str = Field(default="waternet", description="Service name")
    version: str = Field(description="Deployed application version")
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"] | None = None
