"""
Rendering context logger.

Provides logging interface for the rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from quill.utils.logger import request_context as _request_context
from quill.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, console_level: str = "INFO") -> Path:
    """
    Setup logger for the rendering context.

    Configures loguru with provenance tracking and rendering-specific context.

    Args:
        log_dir: Directory for this rendering session
        console_level: Minimum level shown on the console

    Returns:
        Path to log file

    Example:
        from quill.contexts.rendering.logger import setup_rendering_logger

        log_file = setup_rendering_logger(log_dir)
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={
            "Remote compiler": os.getenv("REMOTE_COMPILER_URL") or "(not configured)",
            "Page size": os.getenv("PAGE_SIZE") or "(layout default)",
        },
        console_level=console_level,
    )


def request_context(request_id: str):
    """Tag every log record inside the block with the render request id."""
    return _request_context(request_id)


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(request_id: str, is_markup: bool, source_length: int, remote_enabled: bool) -> None:
    """Log start of a pipeline run with context."""
    kind = "markup" if is_markup else "plain text"
    _log_info(f"Rendering {kind} ({source_length} chars) [{request_id}]")
    _log_debug(f"  Remote stage: {'enabled' if remote_enabled else 'skipped'}")


def log_stage_failure(stage: str, error: Exception, next_stage: str) -> None:
    """Log a failed stage and where the pipeline goes next."""
    _log_warning(f"Stage '{stage}' failed, falling back to '{next_stage}'")
    _log_debug(f"  {type(error).__name__}: {error}")


def log_render_result(result, verbose: bool = False) -> None:
    """
    Log the outcome of a pipeline run.

    Args:
        result: RenderResult from RenderPipeline.render()
        verbose: Log every recorded stage error (default: first 3)
    """
    summary = (
        f"{result.stage.value} stage produced {result.page_count or '?'} page(s), "
        f"{len(result.blob)} bytes ({result.elapsed_s:.2f}s) [{result.request_id}]"
    )
    if result.degraded:
        _log_warning(summary)
    else:
        _log_success(summary)

    error_limit = len(result.errors) if verbose else 3
    for i, err in enumerate(result.errors[:error_limit], 1):
        _log_debug(f"  Error {i}: {err}")
    if len(result.errors) > error_limit:
        _log_debug(f"  ... and {len(result.errors) - error_limit} more errors")
