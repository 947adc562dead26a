"""
Parsing context logger.

Provides logging interface for the parsing context with automatic [parse] prefix.
All parsing modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from quill.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[parse]"


def setup_parsing_logger(log_dir: Path, console_level: str = "INFO") -> Path:
    """
    Setup logger for the parsing context.

    Args:
        log_dir: Directory for this parsing session
        console_level: Minimum level shown on the console

    Returns:
        Path to log file
    """
    return _setup_logger(context_name="parse", log_dir=log_dir, console_level=console_level)


# Wrapper functions with automatic [parse] prefix


def _log_info(message: str) -> None:
    """Log info message with [parse] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [parse] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [parse] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level parsing-specific logging helpers


def log_tokenizer_summary(raw) -> None:
    """Log what the tokenizer found (raw: RawDocument)."""
    item_count = sum(len(section.items) for section in raw.sections) + len(raw.leftover)
    _log_debug(
        f"Tokenized {raw.macro_count} macros into {len(raw.sections)} sections, {item_count} items"
    )
    if raw.name is None:
        _log_debug("  No header name found")


def log_malformed_macro(error) -> None:
    """Log a recovered MalformedMarkupError."""
    _log_warning(f"Malformed macro kept as plain text: {error.message}")
    _log_debug(f"  {error}")


def log_document_summary(document, strategy: str) -> None:
    """Log the shape of a built Document (strategy: 'markup' or 'plain')."""
    item_count = sum(1 for _ in document.items())
    _log_info(f"Parsed {strategy} input: {len(document.sections)} sections, {item_count} items")
    for section in document.sections:
        _log_debug(f"  {section.title}: {len(section.items)} items")
