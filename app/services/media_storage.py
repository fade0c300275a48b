"""Local media storage for uploaded files (vlogger post screenshots). Files are served under media_public_prefix."""
import logging
import re
import time
import uuid
from pathlib import Path

from app.config import get_settings
from app.services.errors import DependencyFailure

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def media_upload_dir() -> Path:
    settings = get_settings()
    if settings.media_upload_dir:
        return Path(settings.media_upload_dir)
    return Path(__file__).resolve().parent.parent.parent / "uploads" / "media"


def _safe_name(filename: str | None) -> str:
    name = _UNSAFE_CHARS.sub("-", Path(filename or "").name).strip("-.")
    return name[:100] or f"{uuid.uuid4().hex}.bin"


class MediaStorage:
    def __init__(self, root: Path, public_prefix: str = "/media"):
        self.root = Path(root)
        self.public_prefix = public_prefix.rstrip("/")

    def save(self, folder: str, filename: str | None, content: bytes) -> str:
        """Write content to <root>/<folder>/<timestamp>-<name> and return its public URL."""
        relative = Path(folder) / f"{int(time.time() * 1000)}-{_safe_name(filename)}"
        path = self.root / relative
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as f:
                f.write(content)
        except OSError as e:
            logger.error("Media upload to %s failed: %s", path, e)
            raise DependencyFailure("Failed to upload screenshot")
        return f"{self.public_prefix}/{relative.as_posix()}"


def get_media_storage() -> MediaStorage:
    return MediaStorage(media_upload_dir(), get_settings().media_public_prefix)
