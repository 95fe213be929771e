"""FlareSolverr proxy client used to get past ascii2d's bot protection."""

from ascii2d.flaresolverr.client import FlareSolverrClient, FlareSolverrError
from ascii2d.flaresolverr.models import FlareSolverrResponse, Solution

__all__ = [
    "FlareSolverrClient",
    "FlareSolverrError",
    "FlareSolverrResponse",
    "Solution",
]
