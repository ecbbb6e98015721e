"""
Media Uploader - Pushes photo buffers to Cloudinary.

This module talks to the Cloudinary upload REST API directly with
httpx, so the upload is an ordinary awaited request on the event loop
and its failures propagate like any other error in the service.
"""

import httpx
import logging
from typing import Optional

from ..core.config import MediaHostConfig
from ..core.errors import MissingFileError, UploadError
from ..core.utils import get_unix_timestamp, sign_upload_params, truncate_string

# Configure logging
logger = logging.getLogger(__name__)


class MediaUploader:
    """
    Forwards in-memory byte buffers to the media host.

    Uploads are signed with the account secret and request automatic
    resource-type detection. Nothing is kept locally, and nothing is
    rolled back remotely if the caller's next step fails.
    """

    def __init__(self, config: MediaHostConfig):
        """Initialize the uploader with the media host configuration."""
        self.upload_url = config.upload_url
        self.api_key = config.api_key
        self.api_secret = config.api_secret
        self.timeout = config.timeout

    async def upload(
        self,
        buffer: Optional[bytes],
        filename: Optional[str] = None,
        content_type: Optional[str] = None
    ) -> str:
        """
        Upload a buffer and return its public secure URL.

        Args:
            buffer: Raw file content
            filename: Original filename, forwarded to the host if known
            content_type: MIME type declared by the client, if any

        Returns:
            The secure_url reported by the media host

        Raises:
            MissingFileError: no buffer, or an empty one (host not contacted)
            UploadError: the host could not be reached or rejected the upload
        """
        if not buffer:
            raise MissingFileError()

        params = {"timestamp": get_unix_timestamp()}
        form = {
            **{key: str(value) for key, value in params.items()},
            "api_key": self.api_key,
            "signature": sign_upload_params(params, self.api_secret),
        }
        files = {
            "file": (
                filename or "upload",
                buffer,
                content_type or "application/octet-stream"
            )
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.upload_url, data=form, files=files)
        except httpx.TimeoutException as e:
            logger.error("Timeout while uploading to the media host")
            raise UploadError("Erro ao fazer upload da imagem.") from e
        except httpx.HTTPError as e:
            logger.error(f"Error uploading to the media host: {str(e)}")
            raise UploadError("Erro ao fazer upload da imagem.") from e

        if response.status_code >= 400:
            logger.error(
                f"Media host rejected upload: "
                f"Status {response.status_code}, Body: {truncate_string(response.text)}"
            )
            raise UploadError("Erro ao fazer upload da imagem.")

        try:
            payload = response.json()
        except ValueError:
            payload = None
        secure_url = payload.get("secure_url") if isinstance(payload, dict) else None

        if not secure_url:
            logger.error(
                f"Media host response has no secure_url: {truncate_string(response.text)}"
            )
            raise UploadError("Erro ao fazer upload da imagem.")

        logger.info(f"Uploaded {len(buffer)} bytes to {secure_url}")
        return secure_url
