from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse

from pixieshare.domain.errors import Gone, NotFound
from pixieshare.domain.media import viewer_kind
from pixieshare.features.share.service import (
    RAW_CACHE_CONTROL,
    SharedFile,
    ShareService,
    content_disposition,
)
from pixieshare.web.templating import absolute_base, templates

router = APIRouter(tags=["share"])


def _service(request: Request) -> ShareService:
    return ShareService(blobs=request.app.state.blobs, metadata=request.app.state.metadata)


def _open(request: Request, file_id: str) -> SharedFile:
    try:
        return _service(request).open(file_id=file_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="not_found")
    except Gone:
        raise HTTPException(status_code=410, detail="gone")


def _file_response(shared: SharedFile, headers: dict[str, str]) -> FileResponse:
    # stat_result comes from the open handle, so FileResponse does not stat the path again.
    return FileResponse(
        shared.blob.path,
        stat_result=shared.blob.stat,
        headers={"Content-Type": shared.descriptor.mime_type, **headers},
    )


@router.get("/f/{file_id}", response_class=HTMLResponse)
def view_file(request: Request, file_id: str) -> HTMLResponse:
    try:
        meta = _service(request).resolve(file_id=file_id)
    except NotFound:
        return templates.TemplateResponse(
            request,
            "not_found.html",
            {"title": "Not found"},
            status_code=404,
        )

    base = absolute_base(request)
    return templates.TemplateResponse(
        request,
        "view.html",
        {
            "title": meta.original_name,
            "meta": meta,
            "kind": viewer_kind(meta.mime_type).value,
            "raw_url": f"{base}/raw/{meta.id}",
            "download_url": f"{base}/d/{meta.id}",
        },
    )


@router.api_route("/raw/{file_id}", methods=["GET", "HEAD"])
def raw_file(request: Request, file_id: str) -> FileResponse:
    shared = _open(request, file_id)
    return _file_response(shared, {"Cache-Control": RAW_CACHE_CONTROL})


@router.api_route("/d/{file_id}", methods=["GET", "HEAD"])
def download_file(request: Request, file_id: str) -> FileResponse:
    shared = _open(request, file_id)
    return _file_response(
        shared,
        {"Content-Disposition": content_disposition(shared.descriptor.original_name)},
    )
