"""
Loguru setup shared by the parsing, rendering and generation contexts.

Each session gets a DEBUG log file under its own directory plus a console
sink. Every record carries a request id: the render pipeline binds it with
request_context(), and records logged outside a render show NO_REQUEST_ID.
Context-specific wrappers live in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import ContextManager, Dict, Optional

from dotenv import load_dotenv
from loguru import logger

import quill

load_dotenv()

NO_REQUEST_ID = "--------"

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {extra[request_id]} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <dim>{extra[request_id]}</dim> | <level>{message}</level>"


def request_context(request_id: str) -> ContextManager:
    """
    Tag every record logged inside the block with request_id.

    Example:
        with request_context("a1b2c3d4"):
            logger.info("[render] Rendering markup")  # ... | a1b2c3d4 | [render] ...
    """
    return logger.contextualize(request_id=request_id)


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, object]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Point loguru at a session log file and the console.

    Args:
        context_name: "render", "parse" or "generate"; names the log file
        log_dir: Session directory (created if missing)
        extra_provenance: Context settings written into the session header
        console_level: Minimum level shown on the console (the file gets DEBUG)

    Returns:
        Path to <log_dir>/<context_name>.log
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    logger.configure(extra={"request_id": NO_REQUEST_ID})

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_session_header(context_name, extra_provenance)

    return log_file


def log_session_header(context_name: str, settings: Optional[Dict[str, object]] = None) -> None:
    """Write the command line, environment and context settings at the top of a session log."""
    logger.info("=" * 80)
    logger.info(f"QUILL {quill.__version__} [{context_name}] session")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    for key, value in (settings or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
