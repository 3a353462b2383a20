import logging

import uvicorn
from fastapi import FastAPI

from pixieshare.config import AppConfig, load_config
from pixieshare.features.share.api import router as share_router
from pixieshare.features.upload.api import router as upload_router
from pixieshare.infra.metadata import MetadataStore
from pixieshare.infra.storage import BlobStore
from pixieshare.logging_config import setup_logging
from pixieshare.web.health import router as health_router
from pixieshare.web.home import router as home_router

logger = logging.getLogger(__name__)


def create_app(cfg: AppConfig | None = None) -> FastAPI:
    cfg = cfg or load_config()
    setup_logging(cfg.log_level)
    logger.info("Uploads -> %s", cfg.upload_dir)
    logger.info("Max file size -> %d MB", cfg.max_file_size_mb)
    metadata = MetadataStore(cfg.metadata_path)
    metadata.load()

    app = FastAPI(title="PixieShare", version="0.1.0")
    app.state.cfg = cfg
    app.state.blobs = BlobStore(cfg.upload_dir)
    app.state.metadata = metadata
    app.include_router(health_router)
    app.include_router(home_router)
    app.include_router(upload_router)
    app.include_router(share_router)
    return app


def run() -> None:
    cfg = app.state.cfg
    logger.info("PixieShare running on http://localhost:%d", cfg.port)
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_config=None)


app = create_app()


if __name__ == "__main__":
    run()
