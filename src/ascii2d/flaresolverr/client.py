"""Async client for the FlareSolverr challenge-solving proxy.

FlareSolverr renders pages in a real browser to get past bot protection and
hands back the resolved URL and HTML. Only the commands the ascii2d client
needs are wrapped here: session creation and destruction, and GET requests
optionally scoped to a session.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
from pydantic import ValidationError

from ascii2d.config import Settings, get_settings
from ascii2d.exceptions import Ascii2dError
from ascii2d.flaresolverr.models import (
    PARAM_MAX_TIMEOUT,
    PARAM_SESSION,
    FlareSolverrResponse,
)
from ascii2d.logging import get_logger

logger = get_logger("ascii2d.flaresolverr.client")


class FlareSolverrError(Ascii2dError):
    """Raised when a FlareSolverr command fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FlareSolverrClient:
    """Async client for the FlareSolverr v1 API.

    Attributes:
        base_url: Base URL of the FlareSolverr server
    """

    def __init__(
        self,
        base_url: str | None = None,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the FlareSolverr client.

        Args:
            base_url: FlareSolverr server URL (defaults to settings)
            settings: Settings instance (uses global if not provided)
            http_client: Preconfigured HTTP client, mostly for tests
        """
        if base_url is None:
            settings = settings or get_settings()
            base_url = settings.flaresolverr_base_url
        self.base_url = base_url.rstrip("/")
        self._client = http_client

    @asynccontextmanager
    async def _get_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Get or create an async HTTP client.

        Challenge solving can take as long as the maxTimeout sent with the
        command, so the transport itself has no timeout.

        Yields:
            httpx.AsyncClient: The HTTP client instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=None)

        try:
            yield self._client
        except httpx.HTTPStatusError as e:
            raise FlareSolverrError(
                f"FlareSolverr API error: {self._error_message(e.response)}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise FlareSolverrError(
                f"Failed to reach FlareSolverr at {self.base_url}. "
                f"Is it running? Error: {e}"
            ) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json().get("message") or response.text
        except ValueError:
            return response.text

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FlareSolverrClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _command(self, cmd: str, **params: Any) -> FlareSolverrResponse:
        """Send a command to the v1 endpoint.

        Args:
            cmd: Command name (e.g. "request.get")
            **params: Extra payload fields, None values are dropped

        Returns:
            FlareSolverrResponse: The decoded response envelope

        Raises:
            FlareSolverrError: On transport errors, HTTP errors or a non-ok status
        """
        payload = {"cmd": cmd, **{k: v for k, v in params.items() if v is not None}}

        async with self._get_client() as client:
            response = await client.post(f"{self.base_url}/v1", json=payload)
            response.raise_for_status()

        try:
            result = FlareSolverrResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise FlareSolverrError(f"Invalid FlareSolverr response to {cmd}: {e}") from e

        if not result.ok:
            logger.error(f"FlareSolverr {cmd} failed: {result.message}")
            raise FlareSolverrError(f"FlareSolverr {cmd} failed: {result.message}")

        return result

    async def sessions_create(self, session: str, options: dict[str, Any] | None = None) -> None:
        """Create a named browser session.

        Args:
            session: Session name
            options: Extra command fields (e.g. "proxy")
        """
        params = {**(options or {}), "session": session}
        await self._command("sessions.create", **params)
        logger.debug(f"Created FlareSolverr session {session}")

    async def sessions_destroy(self, session: str) -> None:
        """Destroy a named browser session.

        Args:
            session: Session name
        """
        await self._command("sessions.destroy", session=session)
        logger.debug(f"Destroyed FlareSolverr session {session}")

    async def get(
        self,
        url: str,
        session: str | None = None,
        max_timeout: int | None = None,
    ) -> FlareSolverrResponse:
        """Fetch a page through the browser, solving any challenge on the way.

        Args:
            url: Page to load
            session: Session to run in, or None for a throwaway browser
            max_timeout: Solve timeout in milliseconds

        Returns:
            FlareSolverrResponse: Response whose solution holds the final URL and HTML

        Raises:
            FlareSolverrError: If the request fails or carries no solution
        """
        logger.debug(f"FlareSolverr GET {url}", session=session)
        result = await self._command(
            "request.get",
            url=url,
            **{PARAM_SESSION: session, PARAM_MAX_TIMEOUT: max_timeout},
        )
        if result.solution is None:
            raise FlareSolverrError(f"FlareSolverr returned no solution for {url}")
        return result

    @asynccontextmanager
    async def session(self, name: str) -> AsyncIterator[str]:
        """Scope a browser session to an ``async with`` block.

        The session is destroyed on every exit path. Destruction is best
        effort: a failure is logged and never replaces the block's outcome.

        Args:
            name: Session name

        Yields:
            str: The session name
        """
        await self.sessions_create(name)
        try:
            yield name
        finally:
            try:
                await self.sessions_destroy(name)
            except FlareSolverrError as e:
                logger.warning(f"Failed to destroy FlareSolverr session {name}: {e}")
