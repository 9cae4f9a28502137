"""Rich-text content normalization.

The editor embeds pasted images as ``data:image/...;base64`` URIs. Before a
proposal is stored each such image is uploaded to object storage and its
``src`` rewritten to the public URL, so stored documents stay small.
"""

import base64
import binascii
import re
import uuid

from collabportal.core.logging import get_logger
from collabportal.infrastructure.storage import StorageError, StorageProvider

logger = get_logger(__name__)

IMG_TAG_PATTERN = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
DATA_SRC_PATTERN = re.compile(
    r"""(?<![\w-])src\s*=\s*(["'])(data:image/([\w.+-]*);base64,([^"']*))\1""",
    re.IGNORECASE,
)

DEFAULT_IMAGE_EXTENSION = "png"


class ContentNormalizer:
    """Uploads inline base64 images and rewrites their ``src`` attributes."""

    def __init__(self, storage: StorageProvider, bucket: str, max_image_size: int | None = None) -> None:
        """Initialize the normalizer.

        Args:
            storage: Storage provider receiving the images.
            bucket: Bucket the images are stored in.
            max_image_size: Largest decoded image accepted, in bytes.
        """
        self.storage = storage
        self.bucket = bucket
        self.max_image_size = max_image_size

    async def normalize(self, html: str, prefix: str = "rich-text-images") -> str:
        """Replace inline base64 images with uploaded copies.

        Images are processed in document order, one upload at a time. An
        image that cannot be decoded or uploaded is left as it was. Only the
        ``src`` value changes; all other markup is kept byte for byte.

        Args:
            html: HTML fragment from the editor.
            prefix: Key prefix for the uploaded objects.

        Returns:
            The rewritten HTML, or ``html`` itself when it has no inline images.
        """
        if not html or "data:image" not in html:
            return html

        replacements: list[tuple[int, int, str]] = []
        for tag in IMG_TAG_PATTERN.finditer(html):
            src = DATA_SRC_PATTERN.search(tag.group(0))
            if src is None:
                continue
            url = await self._upload(src.group(3), src.group(4), prefix)
            if url is None:
                continue
            start = tag.start() + src.start(2)
            end = tag.start() + src.end(2)
            replacements.append((start, end, url))

        if not replacements:
            return html

        parts = []
        cursor = 0
        for start, end, url in replacements:
            parts.append(html[cursor:start])
            parts.append(url)
            cursor = end
        parts.append(html[cursor:])
        return "".join(parts)

    async def _upload(self, media_subtype: str, payload: str, prefix: str) -> str | None:
        """Decode and upload one image, returning its public URL or None."""
        ext = media_subtype.lower() or DEFAULT_IMAGE_EXTENSION
        if ext == "svg+xml":
            ext = "svg"
        try:
            content = base64.b64decode(re.sub(r"\s+", "", payload), validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error("Skipping inline image with invalid base64", error=str(e))
            return None
        if not content:
            logger.error("Skipping empty inline image")
            return None

        if self.max_image_size is not None and len(content) > self.max_image_size:
            logger.error(
                "Skipping inline image over size limit",
                size=len(content),
                max_size=self.max_image_size,
            )
            return None

        key = f"{prefix}/{uuid.uuid4().hex}.{ext}"
        try:
            stored = await self.storage.upload(
                self.bucket, key, content, f"image/{media_subtype or DEFAULT_IMAGE_EXTENSION}"
            )
        except StorageError as e:
            logger.error("Failed to upload inline image", key=key, error=str(e))
            return None

        logger.debug("Inline image uploaded", key=key, size=stored.size)
        return stored.url
