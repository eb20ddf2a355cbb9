from fastapi import APIRouter, Depends, UploadFile, File, HTTPException, status, Form
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from typing import Any, Optional
import logging

from seenai.config.settings import Settings, get_settings
from seenai.db.database import get_db
from seenai.errors import (
    AnalysisServiceError,
    MetadataWriteError,
    StorageWriteError,
    Unauthenticated,
    ValidationError,
)
from seenai.repositories.video_repository import VideoRepository
from seenai.routers.auth_router import get_current_principal, unauthenticated_exception
import seenai.schemas.pydantic_schemas as schemas
from seenai.services.recent_uploads import RecentUploadsView
from seenai.services.upload_service import upload_video
from seenai.utils.analysis_client import analyze_video
from seenai.utils.storage import ObjectStorage, get_storage

router = APIRouter(prefix="/api/videos", tags=["Videos"])

logger = logging.getLogger(__name__)


# =======================================================
# ENDPOINTS
# =======================================================

@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.UploadOut,
    summary="Stores a video and records its metadata for analysis.",
)
async def upload_video_endpoint(
    title: str = Form(""),
    category: str = Form(""),
    description: str = Form(""),
    tone_requested: bool = Form(True),
    video_file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
    principal: Optional[schemas.Principal] = Depends(get_current_principal),
):
    data = await video_file.read() if video_file is not None else None
    file_name = video_file.filename if video_file is not None else None
    content_type = video_file.content_type if video_file is not None else None
    logger.info(f"Upload received: {file_name!r} ({len(data or b'')} bytes)")

    repository = VideoRepository(db)
    try:
        video = await upload_video(
            principal,
            file_name,
            data,
            title=title,
            category=category,
            description=description,
            tone_requested=tone_requested,
            storage=storage,
            repository=repository,
            content_type=content_type,
            compensate=settings.compensate_orphaned_blobs,
        )
    except Unauthenticated as e:
        raise unauthenticated_exception(str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageWriteError as e:
        logger.error(f"Upload failed at storage step: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Upload failed.")
    except MetadataWriteError as e:
        logger.error(f"Upload failed at metadata step: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Upload failed.")

    view = RecentUploadsView(repository, limit=settings.recent_uploads_limit)
    return {
        "message": "Upload successful!",
        "video": video,
        "recent": view.on_uploaded(principal),
    }


@router.get(
    "/recent",
    response_model=list[schemas.VideoRecordOut],
    summary="Most recent uploads of the authenticated user",
)
def list_recent_videos(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    principal: Optional[schemas.Principal] = Depends(get_current_principal),
):
    view = RecentUploadsView(VideoRepository(db), limit=settings.recent_uploads_limit)
    return view.refresh(principal)


@router.get(
    "/",
    response_model=list[schemas.VideoRecordOut],
    summary="All videos uploaded by the authenticated user",
)
def list_my_videos(
    db: Session = Depends(get_db),
    principal: Optional[schemas.Principal] = Depends(get_current_principal),
):
    if principal is None:
        raise unauthenticated_exception("Invalid authentication credentials.")
    rows = VideoRepository(db).recent_for_user(principal.id)
    return [schemas.to_video_record(row) for row in rows]


@router.post(
    "/analyze",
    summary="Forwards a video to the analysis service and returns its result",
)
async def analyze_video_endpoint(
    video_file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings),
    principal: Optional[schemas.Principal] = Depends(get_current_principal),
) -> dict[str, Any]:
    if principal is None:
        raise unauthenticated_exception("Invalid authentication credentials.")
    data = await video_file.read() if video_file is not None else None
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please select a video file.")

    try:
        return await run_in_threadpool(
            analyze_video,
            settings.analysis_service_url,
            data,
            video_file.filename,
            video_file.content_type,
            settings.analysis_timeout,
        )
    except AnalysisServiceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get(
    "/{video_id}",
    response_model=schemas.VideoRecordOut,
    summary="Detailed information for one of the user's videos",
)
def get_video_by_id(
    video_id: int,
    db: Session = Depends(get_db),
    principal: Optional[schemas.Principal] = Depends(get_current_principal),
):
    if principal is None:
        raise unauthenticated_exception("Invalid authentication credentials.")

    # Other users' videos are reported as missing
    video = VideoRepository(db).get_for_user(video_id, principal.id)
    if not video:
        raise HTTPException(status_code=404, detail=f"Video with id={video_id} does not exist.")
    return schemas.to_video_record(video)
