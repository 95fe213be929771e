"""Response models for the FlareSolverr v1 API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

PARAM_SESSION = "session"
PARAM_MAX_TIMEOUT = "maxTimeout"


class Solution(BaseModel):
    """Page state after FlareSolverr passed the challenge."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    url: str = ""
    status: int = 0
    response: str = ""
    headers: dict[str, Any] = Field(default_factory=dict)
    cookies: list[dict[str, Any]] = Field(default_factory=list)
    user_agent: str = Field(default="", alias="userAgent")


class FlareSolverrResponse(BaseModel):
    """Envelope returned by every FlareSolverr command."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    status: str
    message: str = ""
    solution: Solution | None = None
    start_timestamp: int = Field(default=0, alias="startTimestamp")
    end_timestamp: int = Field(default=0, alias="endTimestamp")
    version: str = ""

    @property
    def ok(self) -> bool:
        """Whether FlareSolverr reported success."""
        return self.status == "ok"
