import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_UPLOAD_DIR = Path(__file__).resolve().parent.parent / "uploads"
METADATA_FILENAME = "_files.json"


@dataclass(frozen=True)
class AppConfig:
    upload_dir: Path
    port: int = 3000
    host: str = "0.0.0.0"
    max_file_size_mb: int = 500
    log_level: str = "INFO"

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @property
    def metadata_path(self) -> Path:
        return self.upload_dir / METADATA_FILENAME


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_config() -> AppConfig:
    upload_dir = os.environ.get("UPLOAD_DIR") or str(DEFAULT_UPLOAD_DIR)
    return AppConfig(
        upload_dir=Path(upload_dir).resolve(),
        port=_int_env("PORT", 3000),
        host=os.environ.get("HOST", "0.0.0.0"),
        max_file_size_mb=_int_env("MAX_FILE_SIZE_MB", 500),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
