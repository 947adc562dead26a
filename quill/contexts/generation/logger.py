"""
Generation context logger.

Provides logging interface for the generation context with automatic [generate] prefix.
All generation modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from quill.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[generate]"


def setup_generation_logger(log_dir: Path, console_level: str = "INFO") -> Path:
    """
    Setup logger for the generation context.

    Args:
        log_dir: Directory for this generation session
        console_level: Minimum level shown on the console

    Returns:
        Path to log file
    """
    return _setup_logger(context_name="generate", log_dir=log_dir, console_level=console_level)


# Wrapper functions with automatic [generate] prefix


def _log_info(message: str) -> None:
    """Log info message with [generate] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [generate] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [generate] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [generate] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level generation-specific logging helpers


def log_generation_result(generated, generator_name: str) -> None:
    """Log what a generation service returned (generated: GeneratedResume)."""
    kind = "markup" if generated.is_markup else "plain text"
    _log_success(f"{generator_name} produced {kind} ({len(generated.text)} chars)")
