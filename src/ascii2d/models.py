"""Data models for ascii2d search results."""

from enum import Enum

from pydantic import BaseModel, Field


class ResultType(str, Enum):
    """Ranking variant of an ascii2d result page."""

    COLOR = "color"
    BOVW = "bovw"

    @classmethod
    def from_url(cls, url: str) -> "ResultType | None":
        """Derive the ranking variant from a result page URL.

        Args:
            url: Result page URL

        Returns:
            ResultType | None: The variant, or None if the URL names neither
        """
        if "/color/" in url:
            return cls.COLOR
        if "/bovw/" in url:
            return cls.BOVW
        return None


class Ascii2dResult(BaseModel):
    """First match scraped from an ascii2d result page."""

    title: str = Field(description="Title of the matched work")
    author: str = Field(default="", description="Author display name")
    url: str = Field(default="", description="Link to the matched work")
    author_url: str = Field(default="", description="Link to the author page")
    thumbnail: str = Field(default="", description="Absolute thumbnail URL on the ascii2d host")

    result_url: str = Field(default="", description="Result page this record was extracted from")
    result_type: ResultType | None = Field(default=None, description="Ranking variant of the result page")
    success: bool = Field(default=False, description="Whether a titled entry was found")

    def __str__(self) -> str:
        """Human-readable string representation."""
        kind = self.result_type.value if self.result_type else "unknown"
        return f"[{kind}] {self.title} / {self.author}\n{self.url}"
