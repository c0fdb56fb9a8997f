"""Download and thumbnail helpers shared by the preservation producers."""

from __future__ import annotations

import asyncio
import io

import httpx
from PIL import Image, UnidentifiedImageError

from link_archiver.utils.errors import ProducerError

PREVIEW_MAX_WIDTH = 1000
PREVIEW_JPEG_QUALITY = 80

DEFAULT_DOWNLOAD_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    ),
    "Accept": "*/*",
}


class FileTooLargeError(ProducerError):
    """Raised when a download exceeds the configured size limit."""

    def __init__(self, message: str = "File exceeds the size limit", provider_name: str | None = None) -> None:
        super().__init__(message=message, provider_name=provider_name)


async def download_with_limit(client: httpx.AsyncClient, url: str, max_bytes: int) -> bytes:
    """GET *url* and return its body, refusing anything over *max_bytes*.

    The body is streamed so an oversized response is abandoned as soon as
    the limit is crossed.

    Raises
    ------
    FileTooLargeError
        When Content-Length or the streamed body exceeds *max_bytes*.
    ProducerError
        On any transport failure or non-2xx status.
    """
    try:
        async with client.stream("GET", url, follow_redirects=True) as response:
            response.raise_for_status()

            declared = response.headers.get("content-length")
            if declared and declared.isdigit() and int(declared) > max_bytes:
                raise FileTooLargeError(message=f"{url} is {declared} bytes, limit is {max_bytes}")

            buffer = bytearray()
            async for chunk in response.aiter_bytes():
                buffer.extend(chunk)
                if len(buffer) > max_bytes:
                    raise FileTooLargeError(message=f"{url} exceeds {max_bytes} bytes")
            return bytes(buffer)
    except httpx.HTTPStatusError as exc:
        raise ProducerError(
            message=f"HTTP {exc.response.status_code} for {url}",
            provider_name="http",
        ) from exc
    except httpx.HTTPError as exc:
        raise ProducerError(message=f"HTTP error fetching {url}: {exc}", provider_name="http") from exc


def _thumbnail(data: bytes, max_width: int) -> bytes:
    img = Image.open(io.BytesIO(data)).convert("RGB")
    if img.width > max_width:
        height = max(1, round(img.height * max_width / img.width))
        img = img.resize((max_width, height), Image.Resampling.LANCZOS)

    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=PREVIEW_JPEG_QUALITY)
    return buf.getvalue()


async def make_preview_jpeg(data: bytes, max_width: int = PREVIEW_MAX_WIDTH) -> bytes:
    """Re-encode image *data* as a JPEG no wider than *max_width* pixels.

    Raises
    ------
    ProducerError
        If Pillow cannot decode the image.
    """
    try:
        return await asyncio.to_thread(_thumbnail, data, max_width)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ProducerError(message=f"Could not build preview: {exc}", provider_name="pillow") from exc
