"""Image attachment support for posts and replies.

An image is given as an http(s) URL or a local file path. It is loaded,
base64-encoded and sent through the one-shot media upload endpoint; the
returned media ID is then attached to the post.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path, PurePosixPath

import httpx

from clawbird.client import XApiClient
from clawbird.errors import ClawbirdError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"

MIME_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
    ".tif": "image/tiff",
}

# Types the tweet_image upload category accepts.
KNOWN_MIME_TYPES = frozenset(MIME_TYPES.values()) | {"image/pjpeg"}


def detect_mime_type(url_or_path: str) -> str:
    """Guess the MIME type from the extension, ignoring any query or fragment."""
    clean = url_or_path.split("?", 1)[0].split("#", 1)[0]
    return MIME_TYPES.get(PurePosixPath(clean).suffix.lower(), DEFAULT_MIME_TYPE)


def _is_url(url_or_path: str) -> bool:
    return url_or_path.startswith(("http://", "https://"))


async def load_image(
    url_or_path: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[str, str]:
    """Load an image and return (base64 data, MIME type).

    For URLs the response Content-Type wins when it names a supported image
    type; otherwise the extension decides.

    Raises:
        ValidationError: Local file does not exist.
        ClawbirdError: The URL answered with a non-2xx status.
    """
    mime_type = detect_mime_type(url_or_path)

    if _is_url(url_or_path):
        async with httpx.AsyncClient(
            transport=transport, timeout=30.0, follow_redirects=True
        ) as client:
            response = await client.get(url_or_path)
        if response.is_error:
            raise ClawbirdError(
                f"Failed to fetch image from {url_or_path}: "
                f"{response.status_code} {response.reason_phrase}"
            )
        content_type = response.headers.get("content-type", "").split(";", 1)[0].strip()
        if content_type in KNOWN_MIME_TYPES:
            mime_type = content_type
        return base64.b64encode(response.content).decode("ascii"), mime_type

    path = Path(url_or_path).expanduser()
    if not path.is_file():
        raise ValidationError(f"Image file not found: {url_or_path}")
    return base64.b64encode(path.read_bytes()).decode("ascii"), mime_type


async def upload_image(
    client: XApiClient,
    url_or_path: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Upload an image and return its media ID."""
    data, mime_type = await load_image(url_or_path, transport=transport)
    response = await client.upload_media(data, mime_type)

    payload = response.data if isinstance(response.data, dict) else {}
    media_id = payload.get("id") or payload.get("media_id_string") or payload.get("media_key")
    if not media_id:
        raise ClawbirdError("Media upload failed — no media ID returned")

    logger.info(f"Uploaded {mime_type} image from {url_or_path} as media {media_id}")
    return str(media_id)
