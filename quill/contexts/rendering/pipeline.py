"""
Render pipeline with a fallback chain.

Stages, strictly in order:
1. remote   - markup input only, when a RemoteCompiler is configured
2. local    - parse (tokenizer + builder, or sectionizer) → paginate → write PDF
3. fallback - single apology page pointing at the raw-source download; if even
              that cannot be rendered, a minimal PDF drawn without the renderer

render() and produce() never raise. The stage that produced the output is
recorded on the RenderResult, logged, and appended to the pipeline event log.
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import httpx

from quill.contexts.parsing.document_model import Document, PlainLine, Section
from quill.contexts.parsing.parser import parse_document
from quill.contexts.rendering.exceptions import ExternalServiceError, UnrecoverableRenderError
from quill.contexts.rendering.geometry import PageGeometry, Typography, load_layout
from quill.contexts.rendering.logger import (
    _log_error,
    _log_warning,
    log_render_result,
    log_render_start,
    log_stage_failure,
    request_context,
)
from quill.contexts.rendering.paginated_renderer import render as render_pages
from quill.contexts.rendering.pdf_writer import write_minimal_pdf, write_pdf
from quill.contexts.rendering.remote_compiler import RemoteCompiler
from quill.utils.event_logging import log_pipeline_event

APOLOGY_TITLE = "Resume Preview Unavailable"
MARKUP_APOLOGY_LINES = (
    "The LaTeX resume could not be properly rendered.",
    "You can download the LaTeX source code instead.",
)
PLAIN_APOLOGY_LINES = (
    "The resume could not be properly rendered.",
    "You can download the original text instead.",
)


class RenderStage(Enum):
    REMOTE = "remote"
    LOCAL = "local"
    FALLBACK = "fallback"


@dataclass
class RenderResult:
    """
    Outcome of one pipeline run.

    Attributes:
        blob: PDF bytes (always a valid, non-empty PDF)
        stage: Stage that produced the blob
        page_count: Pages in the blob (None if the remote PDF was unreadable)
        errors: Messages of every failed stage, in order
        elapsed_s: Wall time of the whole run
        request_id: Short id tying log lines and the pipeline event together
    """

    blob: bytes
    stage: RenderStage
    page_count: Optional[int] = None
    errors: List[str] = field(default_factory=list)
    elapsed_s: float = 0.0
    request_id: str = ""

    @property
    def degraded(self) -> bool:
        return self.stage is RenderStage.FALLBACK


def apology_document(is_markup: bool) -> Document:
    """Document shown when the input cannot be rendered."""
    lines = MARKUP_APOLOGY_LINES if is_markup else PLAIN_APOLOGY_LINES
    return Document(sections=(Section(APOLOGY_TITLE, tuple(PlainLine(line) for line in lines)),))


class RenderPipeline:
    """
    Remote → local → fallback orchestration.

    Holds configuration only (compiler, geometry, typography), so one
    instance can serve concurrent calls.

    Args:
        remote_compiler: Optional remote stage; None skips it
        geometry: Page geometry (default: from the layout config)
        typography: Fonts and spacing (default: from the layout config)

    Example:
        >>> pipeline = RenderPipeline.from_env()
        >>> pdf_bytes = pipeline.produce(source, is_markup=True)
    """

    def __init__(
        self,
        remote_compiler: Optional[RemoteCompiler] = None,
        geometry: Optional[PageGeometry] = None,
        typography: Optional[Typography] = None,
    ):
        if geometry is None or typography is None:
            default_geometry, default_typography = load_layout()
            geometry = geometry or default_geometry
            typography = typography or default_typography

        self.remote_compiler = remote_compiler
        self.geometry = geometry
        self.typography = typography

    @classmethod
    def from_env(
        cls,
        client: Optional[httpx.Client] = None,
        page_size: Optional[str] = None,
    ) -> "RenderPipeline":
        """Pipeline configured from REMOTE_COMPILER_URL and the layout config."""
        geometry, typography = load_layout(page_size=page_size)
        return cls(RemoteCompiler.from_env(client), geometry, typography)

    def produce(self, source: str, is_markup: bool = True) -> bytes:
        """Render source to PDF bytes. Never raises."""
        return self.render(source, is_markup).blob

    def render(
        self,
        source: str,
        is_markup: bool = True,
        default_name: Optional[str] = None,
        default_contact: Optional[str] = None,
    ) -> RenderResult:
        """
        Run the fallback chain and describe what happened.

        Args:
            source: Markup source or plain text
            is_markup: Whether source uses the markup dialect
            default_name: Header name used when the parsed document has none
            default_contact: Header contact used when the parsed document has none

        Returns:
            RenderResult whose blob is always a valid PDF
        """
        request_id = uuid.uuid4().hex[:8]
        start_time = time.time()
        errors: List[str] = []
        source = source or ""

        use_remote = is_markup and self.remote_compiler is not None
        with request_context(request_id):
            log_render_start(request_id, is_markup, len(source), use_remote)

            output = None
            if use_remote:
                output = self._render_remote(source, errors)

            if output is None:
                try:
                    output = self._render_local(source, is_markup, default_name, default_contact)
                except UnrecoverableRenderError as e:
                    errors.append(str(e))
                    log_stage_failure(RenderStage.LOCAL.value, e.original_error or e, RenderStage.FALLBACK.value)
                    output = self._render_fallback(is_markup, errors)

            blob, stage, page_count = output
            result = RenderResult(
                blob=blob,
                stage=stage,
                page_count=page_count,
                errors=errors,
                elapsed_s=time.time() - start_time,
                request_id=request_id,
            )

            log_render_result(result)
            self._record_event(result, is_markup)
            return result

    def _render_remote(self, source: str, errors: List[str]) -> Optional[Tuple[bytes, RenderStage, Optional[int]]]:
        try:
            compiled = self.remote_compiler.compile(source)
        except ExternalServiceError as e:
            errors.append(str(e))
            log_stage_failure(RenderStage.REMOTE.value, e, RenderStage.LOCAL.value)
            return None
        except Exception as e:
            # Injected clients and transports may raise outside the httpx hierarchy
            errors.append(f"Unexpected remote compiler error: {type(e).__name__}: {e}")
            log_stage_failure(RenderStage.REMOTE.value, e, RenderStage.LOCAL.value)
            return None

        return compiled.pdf_bytes, RenderStage.REMOTE, compiled.page_count

    def _render_local(
        self,
        source: str,
        is_markup: bool,
        default_name: Optional[str],
        default_contact: Optional[str],
    ) -> Tuple[bytes, RenderStage, int]:
        """
        Parse, paginate and serialize.

        Raises:
            UnrecoverableRenderError: Wrapping whatever went wrong
        """
        try:
            document = parse_document(source, is_markup)
            if document.is_empty:
                _log_warning("Parsed document is empty, rendering a blank page")
            document = document.with_header_defaults(default_name, default_contact)
            pages = render_pages(document, self.geometry, self.typography)
            blob = write_pdf(pages, self.geometry, title=document.name)
        except Exception as e:
            raise UnrecoverableRenderError(
                "Local rendering failed", stage=RenderStage.LOCAL.value, original_error=e
            ) from e

        return blob, RenderStage.LOCAL, len(pages)

    def _render_fallback(self, is_markup: bool, errors: List[str]) -> Tuple[bytes, RenderStage, int]:
        try:
            pages = render_pages(apology_document(is_markup), self.geometry, self.typography)
            return write_pdf(pages, self.geometry, title=APOLOGY_TITLE), RenderStage.FALLBACK, len(pages)
        except Exception as e:
            errors.append(f"Fallback page failed: {type(e).__name__}: {e}")
            _log_error(f"Fallback page failed, writing minimal PDF: {e}")

        lines = (APOLOGY_TITLE, "") + (MARKUP_APOLOGY_LINES if is_markup else PLAIN_APOLOGY_LINES)
        return write_minimal_pdf(lines), RenderStage.FALLBACK, 1

    def _record_event(self, result: RenderResult, is_markup: bool) -> None:
        event_type = "render_fallback" if result.degraded else "render_completed"
        try:
            log_pipeline_event(
                event_type=event_type,
                source="rendering",
                request_id=result.request_id,
                stage=result.stage.value,
                is_markup=is_markup,
                page_count=result.page_count,
                size_bytes=len(result.blob),
                elapsed_s=round(result.elapsed_s, 3),
                error_count=len(result.errors),
            )
        except OSError as e:
            _log_warning(f"Could not write pipeline event: {e}")
