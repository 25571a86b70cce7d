from pydantic import Field

from medgram.schemas.user import CamelModel


class UploadRequest(CamelModel):
    filename: str = Field(..., min_length=1, max_length=255)


class UploadTargetOut(CamelModel):
    upload_url: str
    public_url: str
