"""
Rendering Context

Responsibilities:
- Lays a Document out onto fixed-size pages (wrapping, two-column lines, page breaks)
- Serializes pages to PDF
- Runs the remote → local → fallback chain and always returns a PDF

Owns: Page geometry and typography, PDF output, fallback policy
Never: Interprets markup itself (delegates to the parsing context)
"""

from quill.contexts.rendering.exceptions import ExternalServiceError, UnrecoverableRenderError
from quill.contexts.rendering.geometry import PageGeometry, Typography, load_layout
from quill.contexts.rendering.paginated_renderer import Page, Rule, TextRun, render
from quill.contexts.rendering.pdf_writer import write_pdf
from quill.contexts.rendering.pipeline import RenderPipeline, RenderResult, RenderStage
from quill.contexts.rendering.remote_compiler import CompilationResult, RemoteCompiler

__all__ = [
    "render",
    "write_pdf",
    "load_layout",
    "PageGeometry",
    "Typography",
    "Page",
    "TextRun",
    "Rule",
    "RenderPipeline",
    "RenderResult",
    "RenderStage",
    "RemoteCompiler",
    "CompilationResult",
    "ExternalServiceError",
    "UnrecoverableRenderError",
]
