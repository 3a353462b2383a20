from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from pixieshare.domain.errors import MalformedRequest
from pixieshare.features.upload.service import UploadService

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload")
async def upload_files(
    request: Request, files: list[UploadFile] | None = File(default=None)
) -> JSONResponse:
    cfg = request.app.state.cfg
    service = UploadService(
        blobs=request.app.state.blobs,
        metadata=request.app.state.metadata,
        max_bytes=cfg.max_file_size_bytes,
    )
    try:
        result = await service.upload_files(files=files or [])
    except MalformedRequest:
        raise HTTPException(status_code=400, detail="no_files")

    # Blobs and links are valid, but the record did not reach disk.
    status_code = 500 if "error" in result else 200
    return JSONResponse(result, status_code=status_code)
