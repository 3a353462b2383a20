from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def absolute_base(request: Request) -> str:
    """Scheme and host the client used, honouring a reverse proxy's X-Forwarded-Proto."""
    proto = request.headers.get("x-forwarded-proto", "").split(",")[0].strip()
    host = request.headers.get("host") or request.url.netloc
    return f"{proto or request.url.scheme}://{host}"
