"""
Remote Compilation Client

Submits markup source to an HTTP compile service that returns a PDF. Every
failure mode (timeout, transport error, non-success status, non-PDF body) is
raised as ExternalServiceError so the pipeline can fall back to local rendering.

Service contract:
    POST {REMOTE_COMPILER_URL}
    JSON body: {"source": "<markup>", "compiler": "<engine>"}
    200 response: application/pdf body
"""

import os
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import httpx
from dotenv import load_dotenv

from quill.contexts.rendering.exceptions import ExternalServiceError
from quill.contexts.rendering.logger import _log_debug, _log_info
from quill.utils.pdf_processing import page_count

load_dotenv()

REMOTE_COMPILER_URL = os.getenv("REMOTE_COMPILER_URL")
REMOTE_COMPILER_TIMEOUT_S = float(os.getenv("REMOTE_COMPILER_TIMEOUT_S", "15"))
REMOTE_COMPILER_ENGINE = os.getenv("REMOTE_COMPILER_ENGINE", "pdflatex")

PDF_MAGIC = b"%PDF"


@dataclass
class CompilationResult:
    """
    Result of a remote compilation.

    Attributes:
        pdf_bytes: PDF returned by the service
        status_code: HTTP status of the response
        elapsed_s: Round-trip time in seconds
        page_count: Number of pages in the PDF (None if unreadable)
    """

    pdf_bytes: bytes
    status_code: int
    elapsed_s: float
    page_count: Optional[int] = None


class RemoteCompiler:
    """
    HTTP client for a remote markup compile service.

    Args:
        url: Endpoint accepting the compile request
        timeout_s: Per-phase httpx timeout (connect, write, each read), and the
                   deadline by which the whole response body must have arrived
        engine: Compiler name sent to the service
        client: Optional httpx.Client to share a connection pool (or inject a
                MockTransport in tests); the caller owns its lifecycle

    Example:
        >>> compiler = RemoteCompiler("https://compile.example.com/pdf", timeout_s=10)
        >>> result = compiler.compile(source)
        >>> len(result.pdf_bytes)
    """

    def __init__(
        self,
        url: str,
        timeout_s: float = REMOTE_COMPILER_TIMEOUT_S,
        engine: str = REMOTE_COMPILER_ENGINE,
        client: Optional[httpx.Client] = None,
    ):
        if not url:
            raise ValueError("RemoteCompiler needs a URL")
        self.url = url
        self.timeout_s = timeout_s
        self.engine = engine
        self._client = client

    @classmethod
    def from_env(cls, client: Optional[httpx.Client] = None) -> Optional["RemoteCompiler"]:
        """Build a compiler from REMOTE_COMPILER_URL, or None when it is not set."""
        if not REMOTE_COMPILER_URL:
            return None
        return cls(REMOTE_COMPILER_URL, client=client)

    def compile(self, source: str) -> CompilationResult:
        """
        Compile markup source remotely.

        Raises:
            ExternalServiceError: On timeout, transport failure, non-2xx status,
                or a response body that is not a PDF
        """
        _log_info(f"Submitting {len(source)} chars to remote compiler")
        _log_debug(f"  URL: {self.url} (timeout {self.timeout_s}s)")

        start_time = time.monotonic()
        status_code, pdf_bytes = self._post(source, deadline=start_time + self.timeout_s)
        elapsed_s = time.monotonic() - start_time

        if not 200 <= status_code < 300:
            raise ExternalServiceError(
                f"Remote compiler returned a non-success response ({elapsed_s:.2f}s)",
                status_code=status_code,
            )

        if not pdf_bytes.startswith(PDF_MAGIC):
            raise ExternalServiceError(
                "Remote compiler response is not a PDF",
                status_code=status_code,
            )

        _log_debug(f"  Remote compiler returned {len(pdf_bytes)} bytes ({elapsed_s:.2f}s)")
        return CompilationResult(
            pdf_bytes=pdf_bytes,
            status_code=status_code,
            elapsed_s=elapsed_s,
            page_count=page_count(pdf_bytes),
        )

    def _post(self, source: str, deadline: float) -> Tuple[int, bytes]:
        payload = {"source": source, "compiler": self.engine}
        headers = {"Accept": "application/pdf"}

        try:
            if self._client is not None:
                return self._send(self._client, payload, headers, deadline)
            with httpx.Client(timeout=self.timeout_s) as client:
                return self._send(client, payload, headers, deadline)
        except httpx.TimeoutException as e:
            raise ExternalServiceError(
                f"Remote compiler timed out after {self.timeout_s}s", original_error=e
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError("Remote compiler request failed", original_error=e) from e

    def _send(self, client: httpx.Client, payload: dict, headers: dict, deadline: float) -> Tuple[int, bytes]:
        """Stream the response body, giving up once the overall deadline has passed."""
        with client.stream("POST", self.url, json=payload, headers=headers, timeout=self.timeout_s) as response:
            chunks = []
            for chunk in response.iter_bytes():
                if time.monotonic() > deadline:
                    raise httpx.ReadTimeout(
                        "Response body not received before the deadline", request=response.request
                    )
                chunks.append(chunk)
            return response.status_code, b"".join(chunks)
