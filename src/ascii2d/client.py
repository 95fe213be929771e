"""Async client for ascii2d reverse image search.

Images given as bytes or streams are uploaded to the file search endpoint,
whose redirect names the color result page. Remote image URLs go through the
URL search endpoint via FlareSolverr, which follows the redirect itself.
Either way both the color and bovw pages are fetched through FlareSolverr and
the first match is extracted from each.
"""

import asyncio
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator
from urllib.parse import urljoin

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator
from structlog.contextvars import bound_contextvars

from ascii2d.config import Settings, get_settings, normalize_host
from ascii2d.exceptions import Ascii2dConnectionError, ImageReadError, RedirectError, UploadError
from ascii2d.extractor import extract_result
from ascii2d.flaresolverr import FlareSolverrClient
from ascii2d.logging import get_logger, search_context
from ascii2d.models import Ascii2dResult, ResultType
from ascii2d.sources import ImageStream, LocalPath, RemoteURL, classify_image

logger = get_logger("ascii2d.client")

API_SEARCH_FILE = "/search/file"
API_SEARCH_URL = "/search/url"
SESSION_PREFIX = "ascii2d_"


def derive_bovw_url(color_url: str, count: int = -1) -> str:
    """Turn a color result URL into the matching bovw result URL.

    Args:
        color_url: URL of the color result page
        count: Number of ``/color/`` segments to replace, -1 for all

    Returns:
        str: URL of the bovw result page
    """
    return color_url.replace("/color/", "/bovw/", count)


def new_session_name() -> str:
    """Build a FlareSolverr session name unique to one search."""
    return f"{SESSION_PREFIX}{datetime.now():%Y%m%d%H%M%S}_{uuid.uuid4().hex[:8]}"


class ClientConfig(BaseModel):
    """Immutable configuration shared by every search of a client."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    host: str = Field(description="Normalized ascii2d host")
    flaresolverr: FlareSolverrClient = Field(description="Challenge-solving proxy client")
    max_timeout: int = Field(default=60000, ge=1, description="FlareSolverr solve timeout in ms")
    # Not consulted by extraction, which always returns the first match
    num_results: int = Field(default=1, ge=1, description="Preferred number of results")

    @field_validator("host", mode="before")
    @classmethod
    def normalize(cls, v: str | None) -> str:
        return normalize_host(v)


class Ascii2dClient:
    """Async client for ascii2d searches.

    Attributes:
        config: Immutable client configuration
    """

    def __init__(
        self,
        host: str | None = None,
        flaresolverr: FlareSolverrClient | None = None,
        num_results: int | None = None,
        max_timeout: int | None = None,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the ascii2d client.

        Args:
            host: ascii2d host override (defaults to settings)
            flaresolverr: FlareSolverr client (built from settings if not provided)
            num_results: Preferred number of results (defaults to settings)
            max_timeout: FlareSolverr solve timeout in ms (defaults to settings)
            settings: Settings instance (uses global if not provided)
            http_client: HTTP client for the upload request, mostly for tests
        """
        settings = settings or get_settings()
        self._owns_flaresolverr = flaresolverr is None
        self.config = ClientConfig(
            host=host if host is not None else settings.ascii2d_host,
            flaresolverr=flaresolverr or FlareSolverrClient(settings=settings),
            num_results=num_results or settings.ascii2d_num_results,
            max_timeout=max_timeout or settings.flaresolverr_max_timeout,
        )
        self._client = http_client

    @property
    def host(self) -> str:
        """Normalized ascii2d host."""
        return self.config.host

    @property
    def flaresolverr(self) -> FlareSolverrClient:
        """FlareSolverr client used for every page fetch."""
        return self.config.flaresolverr

    @asynccontextmanager
    async def _get_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Get or create the HTTP client used for uploads.

        Redirects are never followed, the upload redirect is the result.

        Yields:
            httpx.AsyncClient: The HTTP client instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=None, follow_redirects=False)

        try:
            yield self._client
        except httpx.RequestError as e:
            raise Ascii2dConnectionError(f"Request to {self.host} failed: {e}") from e

    async def close(self) -> None:
        """Close HTTP clients owned by this instance."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._owns_flaresolverr:
            await self.flaresolverr.close()

    async def __aenter__(self) -> "Ascii2dClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Search
    # =========================================================================

    async def search(self, image: object) -> tuple[Ascii2dResult, Ascii2dResult]:
        """Search for an image.

        Args:
            image: Remote URL (str starting with "http"), local path (str or
                path-like), bytes-like object, or binary stream

        Returns:
            tuple[Ascii2dResult, Ascii2dResult]: The color and bovw matches

        Raises:
            UnsupportedImageTypeError: If the image type is not supported
            ImageReadError: If a local image cannot be opened or read
            Ascii2dError: If any step of the search fails
        """
        source = classify_image(image)

        if isinstance(source, RemoteURL):
            return await self.search_by_url(source.url)

        if isinstance(source, LocalPath):
            try:
                f = source.path.open("rb")
            except OSError as e:
                raise ImageReadError(f"Failed to open image {source.path}: {e}") from e
            with f:
                return await self.search(f)

        if isinstance(source, ImageStream):
            return await self.search_by_file(source.read_all())

        return await self.search_by_file(source.data)

    async def search_by_file(self, data: bytes) -> tuple[Ascii2dResult, Ascii2dResult]:
        """Upload image bytes and scrape both result pages.

        Args:
            data: Raw image bytes

        Returns:
            tuple[Ascii2dResult, Ascii2dResult]: The color and bovw matches
        """
        with search_context("file", size=len(data)):
            color_url = await self._submit_file(data)
            bovw_url = derive_bovw_url(color_url, count=1)

            async with self.flaresolverr.session(new_session_name()) as session:
                with bound_contextvars(session=session):
                    color_body, bovw_body = await self._fetch_pair(color_url, bovw_url, session)

            return self._extract(color_body, color_url), self._extract(bovw_body, bovw_url)

    async def search_by_url(self, image_url: str) -> tuple[Ascii2dResult, Ascii2dResult]:
        """Search a remotely hosted image and scrape both result pages.

        Args:
            image_url: URL of the image to search for

        Returns:
            tuple[Ascii2dResult, Ascii2dResult]: The color and bovw matches
        """
        with search_context("url", image_url=image_url):
            search_url = f"{self.host}{API_SEARCH_URL}/{image_url}"
            logger.info("Searching ascii2d by URL")

            color = await self.flaresolverr.get(search_url, max_timeout=self.config.max_timeout)
            color_url = color.solution.url
            bovw_url = derive_bovw_url(color_url)

            bovw = await self.flaresolverr.get(bovw_url, max_timeout=self.config.max_timeout)

            return (
                self._extract(color.solution.response, color_url),
                self._extract(bovw.solution.response, bovw_url),
            )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _submit_file(self, data: bytes) -> str:
        """Post the image to the file search endpoint.

        Returns:
            str: Absolute color result URL taken from the redirect

        Raises:
            UploadError: If the response is not a 302
            RedirectError: If the redirect has no location
        """
        url = f"{self.host}{API_SEARCH_FILE}"
        logger.info(f"Uploading image to ascii2d ({len(data)} bytes)")

        async with self._get_client() as client:
            response = await client.post(
                url,
                files={"file": ("image", data, "application/octet-stream")},
                follow_redirects=False,
            )

        if response.status_code != httpx.codes.FOUND:
            status = f"{response.status_code} {response.reason_phrase}".strip()
            logger.error(f"Unexpected response from file search: {status}")
            raise UploadError(status, status_code=response.status_code)

        location = response.headers.get("location", "")
        if not location:
            raise RedirectError("File search redirect has an empty location")

        color_url = urljoin(self.host + "/", location)
        logger.debug(f"File search redirected to {color_url}")
        return color_url

    async def _fetch_pair(self, color_url: str, bovw_url: str, session: str) -> tuple[str, str]:
        """Fetch both result pages concurrently within one session.

        Both fetches run to completion. A color failure is reported in
        preference to a bovw failure.

        Returns:
            tuple[str, str]: The color and bovw page bodies
        """
        results = await asyncio.gather(
            self.flaresolverr.get(color_url, session=session, max_timeout=self.config.max_timeout),
            self.flaresolverr.get(bovw_url, session=session, max_timeout=self.config.max_timeout),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        color, bovw = results
        return color.solution.response, bovw.solution.response

    def _extract(self, body: str, result_url: str) -> Ascii2dResult:
        result_type = ResultType.from_url(result_url)
        with bound_contextvars(result_url=result_url, result_type=result_type.value if result_type else None):
            result = extract_result(body, result_url, self.host)
        return result.model_copy(update={"result_url": result_url})
