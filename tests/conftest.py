import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure `import pixieshare...` works without installing the package.
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def cfg(tmp_path: Path):
    from pixieshare.config import AppConfig

    return AppConfig(upload_dir=tmp_path / "uploads", max_file_size_mb=1)


@pytest.fixture
def app(cfg):
    from pixieshare.main import create_app

    return create_app(cfg)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)
