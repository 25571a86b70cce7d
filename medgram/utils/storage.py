import time
from dataclasses import dataclass
from typing import Callable, Optional

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from medgram.core.config import Settings
from medgram.core.exceptions import StorageBackendError
from medgram.core.logger import logger


@dataclass(frozen=True)
class UploadTarget:
    upload_url: str
    public_url: str


class MediaUploadCoordinator:
    """Mints presigned PUT URLs so clients upload media straight to the bucket.

    No bytes pass through the API. The coordinator also derives the public
    read URL for the same object; it does not track whether the upload ever
    happens, so a post may reference a URL whose object is not there yet.

    Attributes:
        bucket: Name of the bucket uploads land in
        endpoint_url: Internal address of the object store
        public_url: Base URL browsers use to read objects
        expires_in: Lifetime of an upload URL in seconds
    """

    def __init__(
        self,
        settings: Settings,
        session: Optional[aioboto3.Session] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.bucket: str = settings.MINIO_BUCKET
        self.endpoint_url: str = settings.storage_endpoint_url
        self.public_url: str = settings.MINIO_PUBLIC_URL.rstrip("/")
        self.expires_in: int = settings.UPLOAD_URL_EXPIRE_SECONDS
        self.region: str = settings.MINIO_REGION
        self.session = session or aioboto3.Session(
            aws_access_key_id=settings.MINIO_ROOT_USER,
            aws_secret_access_key=settings.MINIO_ROOT_PASSWORD,
            region_name=settings.MINIO_REGION,
        )
        self._clock = clock

    def object_name_for(self, filename: str) -> str:
        # the filename is used verbatim; callers must not assume it is path-safe
        return f"{int(self._clock() * 1000)}-{filename}"

    def public_url_for(self, object_name: str) -> str:
        return f"{self.public_url}/{self.bucket}/{object_name}"

    async def issue_upload_target(self, filename: str) -> UploadTarget:
        """Presign a single PUT for a fresh object name.

        Raises:
            StorageBackendError: If the object store client cannot sign the request
        """
        object_name = self.object_name_for(filename)
        try:
            async with self.session.client(
                "s3",
                endpoint_url=self.endpoint_url,
                region_name=self.region,
                config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
            ) as s3:
                upload_url = await s3.generate_presigned_url(
                    "put_object",
                    Params={"Bucket": self.bucket, "Key": object_name},
                    ExpiresIn=self.expires_in,
                )
        except (BotoCoreError, ClientError) as e:
            logger.error("upload_target_failed", object_name=object_name, error=str(e))
            raise StorageBackendError() from e

        logger.info("upload_target_issued", object_name=object_name, expires_in=self.expires_in)
        return UploadTarget(upload_url=upload_url, public_url=self.public_url_for(object_name))
