import asyncio
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from tmplink.config import DEFAULT_UPLOAD_URL
from tmplink.errors import MalformedResponse, TransportError, UploadCancelled
from tmplink.models.upload import SanitizedUpload, UploadResponse
from tmplink.services.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class TmpFileUploader:
    """Posts a single file to the tmpfile.link upload API."""

    def __init__(
        self,
        upload_url: str = DEFAULT_UPLOAD_URL,
        timeout: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.upload_url = upload_url
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0))
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    @staticmethod
    def _files(upload: SanitizedUpload):
        if upload.content_type:
            return {"file": (upload.name, upload.content, upload.content_type)}
        # httpx guesses the part's content type from the file name
        return {"file": (upload.name, upload.content)}

    async def upload(self, upload: SanitizedUpload, token: CancellationToken) -> UploadResponse:
        token.raise_if_cancelled()

        async with self._client() as client:
            request_task = asyncio.ensure_future(
                client.post(self.upload_url, files=self._files(upload)))
            cancel_task = asyncio.ensure_future(token.wait())
            try:
                await asyncio.wait(
                    {request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                cancel_task.cancel()
                if not request_task.done():
                    # Cancelling the task tears down the in-flight connection.
                    request_task.cancel()
                    try:
                        await request_task
                    except (asyncio.CancelledError, httpx.HTTPError):
                        pass

            if token.cancelled:
                logger.info(f"Upload of {upload.name} aborted")
                raise UploadCancelled()

            try:
                response = request_task.result()
            except httpx.HTTPError as e:
                reason = str(e) or type(e).__name__
                raise TransportError(f"Upload failed: {reason}", original_error=e) from e

        return self._parse(response)

    @staticmethod
    def _parse(response: httpx.Response) -> UploadResponse:
        if not response.is_success:
            raise TransportError.from_status(response.status_code, response.text)

        try:
            return UploadResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Unexpected upload response: {response.text[:200]!r}")
            raise MalformedResponse(
                "Upload succeeded but the server response could not be read.", e) from e
