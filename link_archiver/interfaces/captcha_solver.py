"""Abstract base class for anti-bot challenge solving backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from link_archiver.models.archive import CaptchaSolveResult

DEFAULT_SOLVE_TIMEOUT_MS = 60_000


# Concrete implementations: FlareSolverrProvider
# Located in: link_archiver/providers/captcha/
class ICaptchaSolver(ABC):
    """Contract for services that obtain bypass cookies for a URL.

    Implementations never raise: every failure is reported through the
    returned status so the caller can carry on without cookies.
    """

    @abstractmethod
    async def solve(self, url: str, max_timeout: int = DEFAULT_SOLVE_TIMEOUT_MS) -> CaptchaSolveResult:
        """Ask the backend to pass the challenge on *url*.

        Parameters
        ----------
        url:
            Page to solve.
        max_timeout:
            Milliseconds the backend may spend on the challenge.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this solver."""
