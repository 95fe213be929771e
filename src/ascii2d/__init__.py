"""ascii2d - reverse image search client.

Submits images to ascii2d.net through a FlareSolverr proxy and extracts the
first match from the color and bovw result pages.
"""

__version__ = "0.1.0"

from ascii2d.config import Settings, get_settings, reload_settings
from ascii2d.client import Ascii2dClient, ClientConfig
from ascii2d.models import Ascii2dResult, ResultType

__all__ = [
    "Ascii2dClient",
    "ClientConfig",
    "Ascii2dResult",
    "ResultType",
    "Settings",
    "get_settings",
    "reload_settings",
    "__version__",
]
