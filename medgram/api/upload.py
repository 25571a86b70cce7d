from fastapi import APIRouter, Depends

from medgram.core.security import Identity
from medgram.dependencies.auth import get_current_identity, get_media_coordinator
from medgram.schemas.upload import UploadRequest, UploadTargetOut
from medgram.utils.storage import MediaUploadCoordinator

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("/presigned", response_model=UploadTargetOut)
async def presigned_upload(
    data: UploadRequest,
    identity: Identity = Depends(get_current_identity),
    media: MediaUploadCoordinator = Depends(get_media_coordinator),
):
    """Hand out a short-lived URL the client PUTs the file to directly"""
    target = await media.issue_upload_target(data.filename)
    return UploadTargetOut(upload_url=target.upload_url, public_url=target.public_url)
