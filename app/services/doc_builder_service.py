"""HTTP client for the external document builder."""

import json
import time
import logging
from typing import Any, Callable, Dict
from urllib.parse import quote

import requests

from app.config import settings
from app.exceptions import DownstreamError, DownstreamTimeoutError, IntegrationError
from app.types.generate_type import BuildDocumentRequest, OutputFormat

logger = logging.getLogger(__name__)

KNOWN_FORMATS = {fmt.value for fmt in OutputFormat}

READ_CHUNK_SIZE = 64 * 1024


def _decode_body(content: bytes, encoding: str = None) -> Any:
    try:
        return json.loads(content)
    except ValueError:
        return content.decode(encoding or "utf-8", errors="replace")


def parse_generated_files(body: Any) -> Dict[str, str]:
    """Check that a /build-document reply is a map of format to filename."""
    if not isinstance(body, dict) or not body:
        raise IntegrationError("Unexpected response from document builder", detail=body)
    for key, value in body.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise IntegrationError("Unexpected response from document builder", detail=body)
    unknown = set(body) - KNOWN_FORMATS
    if unknown:
        logger.warning("Document builder returned unknown formats: %s", sorted(unknown))
    return body


def _unexpected_status(status_code: int, body: Any = None) -> IntegrationError:
    # 1xx/2xx/3xx statuses can't be forwarded with an error body
    return IntegrationError(
        "Unexpected response from document builder",
        detail={"status": status_code, "body": body},
    )


class DocBuilderClient:
    def __init__(
        self,
        base_url: str,
        timeout: float,
        download_timeout: float,
        connect_timeout: float = 10,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.download_timeout = download_timeout
        self.connect_timeout = connect_timeout
        self.clock = clock

    def _timed_out(self):
        logger.error("Document builder timed out after %ss", self.timeout)
        return DownstreamTimeoutError(detail=f"No response within {self.timeout:g} seconds")

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        """Read the whole body, failing once the overall deadline has passed."""
        chunks = []
        for chunk in response.iter_content(chunk_size=READ_CHUNK_SIZE):
            if self.clock() > deadline:
                raise self._timed_out()
            chunks.append(chunk)
        return b"".join(chunks)

    def build_document(self, payload: BuildDocumentRequest) -> Dict[str, str]:
        url = f"{self.base_url}/build-document"
        # requests' timeout bounds each socket wait; the deadline bounds the whole call
        deadline = self.clock() + self.timeout
        try:
            response = requests.post(
                url,
                json=payload.model_dump(mode="json"),
                timeout=(self.connect_timeout, self.timeout),
                stream=True,
            )
            try:
                content = self._read_body(response, deadline)
            finally:
                response.close()
        except requests.exceptions.Timeout:
            raise self._timed_out()
        except requests.exceptions.RequestException as error:
            logger.error("Could not reach document builder: %s", error)
            raise IntegrationError(detail=str(error))

        body = _decode_body(content, response.encoding)
        if response.status_code != 200:
            logger.error("Document builder returned %s: %s", response.status_code, body)
            if response.status_code < 400:
                raise _unexpected_status(response.status_code, body)
            raise DownstreamError(response.status_code, body)

        return parse_generated_files(body)

    def open_download(self, filetype: str, filename: str) -> requests.Response:
        """Start a streamed GET for a generated file. The caller must close it."""
        url = f"{self.base_url}/download/{quote(filetype, safe='')}/{quote(filename, safe='')}"
        logger.info("Proxying download request for: %s", url)
        try:
            response = requests.get(url, stream=True, timeout=(self.connect_timeout, self.download_timeout))
        except requests.exceptions.RequestException as error:
            logger.error("Download proxy error: %s", error)
            raise IntegrationError("Could not download file.", detail=str(error))

        if not 200 <= response.status_code < 300:
            logger.error("Download proxy got %s for %s", response.status_code, url)
            response.close()
            if response.status_code < 400:
                raise _unexpected_status(response.status_code)
            raise DownstreamError(response.status_code, message="Could not download file.")
        return response


def get_doc_builder() -> DocBuilderClient:
    return DocBuilderClient(
        settings.DOC_BUILDER_URL,
        timeout=settings.DOC_BUILDER_TIMEOUT,
        download_timeout=settings.DOWNLOAD_TIMEOUT,
        connect_timeout=settings.DOC_BUILDER_CONNECT_TIMEOUT,
    )
