"""
Audio upload route.

POST /api/upload (multipart, field "audio") → {"audioUrl": "/uploads/<name>"}

Files are stored under the app's upload directory with a random name
and served back statically from /uploads. In production, serve them
from proper object storage instead.
"""

import logging
import shutil
import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Request, UploadFile, status
from fastapi.responses import JSONResponse

from .schemas import ErrorResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])

UPLOADS_MOUNT = "/uploads"


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}},
)
def upload_audio(request: Request, audio: Optional[UploadFile] = File(None)):
    """Store an uploaded audio file and return its public path."""
    if audio is None or not audio.filename:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "No file uploaded"},
        )

    upload_dir = Path(request.app.state.upload_dir)
    name = uuid.uuid4().hex
    with open(upload_dir / name, "wb") as out:
        shutil.copyfileobj(audio.file, out)

    logger.info(f"Stored upload {audio.filename!r} as {name}")
    return {"audioUrl": f"{UPLOADS_MOUNT}/{name}"}
