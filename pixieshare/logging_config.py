import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the service.

    Adds a stdout handler to the root logger unless the ASGI server already
    installed one, and sets the package level so service records are emitted
    either way.
    """
    log_level = getattr(logging, level, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("pixieshare").setLevel(log_level)
    # multipart parser logs every part at debug level
    logging.getLogger("multipart").setLevel(logging.WARNING)
    logging.getLogger("python_multipart").setLevel(logging.WARNING)
