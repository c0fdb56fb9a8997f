"""FlareSolverr captcha solver adapter.

Sends ``{"cmd": "request.get", "url": ..., "maxTimeout": ...}`` to a
FlareSolverr-compatible backend and returns the cookies it obtained while
passing the challenge.  The adapter never raises; every failure mode maps
to a :class:`~link_archiver.models.archive.CaptchaStatus`.
"""

from __future__ import annotations

import httpx
import structlog

from link_archiver.config.settings import Settings
from link_archiver.interfaces.captcha_solver import DEFAULT_SOLVE_TIMEOUT_MS, ICaptchaSolver
from link_archiver.models.archive import CaptchaCookie, CaptchaSolveResult, CaptchaStatus

logger = structlog.get_logger(logger_name=__name__)

# The backend holds the request open until the challenge is solved, so the
# HTTP timeout must outlive maxTimeout.
_HTTP_GRACE_SECONDS = 10.0


class FlareSolverrProvider(ICaptchaSolver):
    """Captcha solving backed by a FlareSolverr HTTP service."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self._endpoint = settings.flaresolverr_url
        self._client = http_client or httpx.AsyncClient()

    async def solve(self, url: str, max_timeout: int = DEFAULT_SOLVE_TIMEOUT_MS) -> CaptchaSolveResult:
        if not self._endpoint:
            return CaptchaSolveResult(status=CaptchaStatus.SKIP.value)

        try:
            response = await self._client.post(
                self._endpoint,
                json={"cmd": "request.get", "url": url, "maxTimeout": max_timeout},
                headers={"Content-Type": "application/json"},
                timeout=max_timeout / 1000 + _HTTP_GRACE_SECONDS,
            )
            if response.status_code != 200:
                logger.warning("captcha_backend_status", url=url, status=response.status_code)
                return CaptchaSolveResult(status=CaptchaStatus.FAIL.value)

            data = response.json()
            solution = data.get("solution") or {}
            raw_cookies = solution.get("cookies")
            cookies = (
                [CaptchaCookie.model_validate(cookie) for cookie in raw_cookies]
                if raw_cookies is not None
                else None
            )
            return CaptchaSolveResult(status=str(data.get("status", "")), cookies=cookies)
        except (httpx.HTTPError, ValueError, AttributeError, TypeError) as exc:
            logger.error("captcha_solve_error", url=url, error=str(exc))
            return CaptchaSolveResult(status=CaptchaStatus.ERROR.value)

    def get_provider_name(self) -> str:
        return "flaresolverr"
