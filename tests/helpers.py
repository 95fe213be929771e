"""Shared page builders and fakes for ascii2d tests."""

import httpx
import structlog

from ascii2d.flaresolverr import FlareSolverrClient, FlareSolverrResponse, Solution

HOST = "https://ascii2d.net"
COLOR_URL = "https://ascii2d.net/search/color/XYZ"
BOVW_URL = "https://ascii2d.net/search/bovw/XYZ"


def item_box(
    title: str | None = "Sample Title",
    author: str | None = "Sample Author",
    url: str = "https://www.pixiv.net/artworks/100",
    author_url: str = "https://www.pixiv.net/users/200",
    thumb: str | None = "/thumbnail/a/b/c/abc.jpg",
) -> str:
    """Render one ascii2d item box.

    A None title renders a box without detail links, like the box holding
    the uploaded image.
    """
    image = f'<img loading="lazy" src="{thumb}" alt="">' if thumb is not None else "<img alt=\"\">"
    links = ""
    if title is not None:
        links = f'<a target="_blank" rel="noopener" href="{url}">{title}</a>'
        if author is not None:
            links += f'\n<a target="_blank" rel="noopener" href="{author_url}">{author}</a>'
    return (
        '<div class="row item-box">'
        f'<div class="col-xs-12 col-sm-12 col-md-4 text-xs-center image-box">{image}</div>'
        '<div class="col-xs-12 col-sm-12 col-md-8 info-box">'
        '<div class="hash">0123456789abcdef</div>'
        f'<div class="detail-box gray-link"><h6>{links}</h6></div>'
        "</div></div>"
    )


def result_page(*boxes: str) -> str:
    """Wrap item boxes in a result page."""
    return (
        "<!DOCTYPE html><html><head><title>二次元画像詳細検索</title></head>"
        '<body><div class="container">' + "".join(boxes) + "</div></body></html>"
    )


class FakeFlareSolverr(FlareSolverrClient):
    """FlareSolverr stand-in serving canned pages and recording commands."""

    def __init__(
        self,
        pages: dict[str, str] | None = None,
        redirects: dict[str, str] | None = None,
        errors: dict[str, Exception] | None = None,
        destroy_error: Exception | None = None,
    ):
        super().__init__(base_url="http://flaresolverr.test")
        self.pages = pages or {}
        self.redirects = redirects or {}
        self.errors = errors or {}
        self.destroy_error = destroy_error
        self.calls: list[tuple] = []
        self.log_contexts: list[dict] = []

    async def sessions_create(self, session, options=None):
        self.calls.append(("sessions.create", session))

    async def sessions_destroy(self, session):
        self.calls.append(("sessions.destroy", session))
        if self.destroy_error is not None:
            raise self.destroy_error

    async def get(self, url, session=None, max_timeout=None):
        self.calls.append(("request.get", url, session, max_timeout))
        self.log_contexts.append(structlog.contextvars.get_contextvars())
        if url in self.errors:
            raise self.errors[url]
        final_url = self.redirects.get(url, url)
        return FlareSolverrResponse(
            status="ok",
            solution=Solution(url=final_url, status=200, response=self.pages.get(final_url, "")),
        )

    def commands(self) -> list[str]:
        return [call[0] for call in self.calls]


def redirecting_transport(requests: list, status_code: int = 302, location: str | None = COLOR_URL):
    """Mock ascii2d transport answering every request with a fixed response."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        headers = {"Location": location} if location is not None else {}
        return httpx.Response(status_code, headers=headers)

    return httpx.MockTransport(handler)
