from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from pixieshare.web.templating import templates

router = APIRouter(tags=["ui"])


@router.get("/", response_class=HTMLResponse)
def home(request: Request) -> HTMLResponse:
    cfg = request.app.state.cfg
    return templates.TemplateResponse(
        request,
        "home.html",
        {
            "title": "PixieShare",
            "max_mb": cfg.max_file_size_mb,
        },
    )
