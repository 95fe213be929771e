"""Extraction of the first match from an ascii2d result page."""

from bs4 import BeautifulSoup

from ascii2d.exceptions import ParseError, ResultNotFoundError
from ascii2d.logging import get_logger
from ascii2d.models import Ascii2dResult, ResultType

logger = get_logger("ascii2d.extractor")


def extract_result(body: str, source_url: str, host: str) -> Ascii2dResult:
    """Extract the first titled entry from a result page.

    Item boxes are scanned in document order. Boxes without detail links
    (ads, the uploaded image itself) are skipped, and so are entries whose
    title link has no text.

    Args:
        body: HTML of the result page
        source_url: URL the page was fetched from, used for the result type
        host: ascii2d host prefixed to the relative thumbnail path

    Returns:
        Ascii2dResult: The match, with ``success`` set and ``result_url`` empty

    Raises:
        ParseError: If the body cannot be parsed
        ResultNotFoundError: If no item box holds a titled entry
    """
    try:
        soup = BeautifulSoup(body, "lxml")
    except Exception as e:
        raise ParseError(f"Failed to parse result page {source_url}: {e}") from e

    result_type = ResultType.from_url(source_url)

    for box in soup.select(".item-box"):
        links = box.select(".detail-box a")
        if not links:
            continue

        title_link = links[0]
        author_link = links[1] if len(links) > 1 else None
        thumb = box.select_one(".image-box img")

        title = title_link.get_text()
        if title == "":
            continue

        logger.debug(f"Found match: {title}")
        return Ascii2dResult(
            title=title,
            author=author_link.get_text() if author_link else "",
            url=title_link.get("href", ""),
            author_url=author_link.get("href", "") if author_link else "",
            thumbnail=host + (thumb.get("src", "") if thumb else ""),
            result_type=result_type,
            success=True,
        )

    raise ResultNotFoundError(soup.get_text())
