import mimetypes
import re
from pathlib import PurePosixPath

from pixieshare.domain.enums import ViewerKind

GENERIC_MIME = "application/octet-stream"

_SAFE_EXT_RE = re.compile(r"^\.[A-Za-z0-9_-]{1,16}$")


def base_name(declared_name: str | None) -> str:
    # Browsers on Windows may send the full client path.
    return (declared_name or "").replace("\\", "/").rsplit("/", 1)[-1]


def safe_extension(declared_name: str | None) -> str:
    """Extension of the client filename, or "" if it is absent or unusual."""
    suffix = PurePosixPath(base_name(declared_name)).suffix
    if not _SAFE_EXT_RE.match(suffix):
        return ""
    return suffix


def infer_mime_type(declared_type: str | None, declared_name: str | None) -> str:
    declared = (declared_type or "").split(";", 1)[0].strip().lower()
    if declared and declared != GENERIC_MIME:
        return declared
    guessed, _ = mimetypes.guess_type(base_name(declared_name), strict=False)
    if guessed:
        return guessed
    return GENERIC_MIME


def viewer_kind(mime_type: str | None) -> ViewerKind:
    if not mime_type:
        return ViewerKind.other
    if mime_type.startswith("image/"):
        return ViewerKind.image
    if mime_type.startswith("video/"):
        return ViewerKind.video
    if mime_type.startswith("audio/"):
        return ViewerKind.audio
    if mime_type == "application/pdf":
        return ViewerKind.pdf
    return ViewerKind.other
