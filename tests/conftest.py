"""Pytest configuration and fixtures for ascii2d tests."""

import pytest

from ascii2d.config import Settings
from tests.helpers import BOVW_URL, COLOR_URL, FakeFlareSolverr, item_box, result_page


@pytest.fixture
def test_settings(monkeypatch):
    """Settings isolated from the environment and any .env file."""
    for var in (
        "ASCII2D_HOST",
        "ASCII2D_NUM_RESULTS",
        "FLARESOLVERR_URL",
        "FLARESOLVERR_MAX_TIMEOUT",
        "ASCII2D_LOG_LEVEL",
        "ASCII2D_LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
    return Settings(_env_file=None)


@pytest.fixture
def single_entry_page():
    """Result page with the uploaded image box followed by one match."""
    return result_page(item_box(title=None), item_box())


@pytest.fixture
def fake_flaresolverr(single_entry_page):
    """FlareSolverr serving one-entry pages for the XYZ color and bovw results."""
    return FakeFlareSolverr(pages={COLOR_URL: single_entry_page, BOVW_URL: single_entry_page})


@pytest.fixture
def upload_requests():
    """Requests seen by the mocked ascii2d upload endpoint."""
    return []
