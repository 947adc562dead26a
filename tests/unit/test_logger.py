"""
Unit tests for loguru setup and the context logger wrappers.
"""

import sys

import pytest
from loguru import logger

from quill.contexts.generation.logger import setup_generation_logger
from quill.contexts.parsing.logger import setup_parsing_logger
from quill.contexts.rendering.logger import log_render_start, request_context, setup_rendering_logger
from quill.contexts.rendering.pipeline import RenderPipeline
from quill.utils.logger import NO_REQUEST_ID, setup_logger


@pytest.fixture(autouse=True)
def restore_loguru():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.mark.unit
def test_setup_logger_creates_context_log(tmp_path):
    log_file = setup_logger("render", tmp_path / "session", extra_provenance={"Page size": "A4"})

    assert log_file == tmp_path / "session" / "render.log"
    logger.remove()
    text = log_file.read_text()
    assert "Working directory:" in text
    assert "Page size: A4" in text


@pytest.mark.unit
def test_context_prefix_written_to_file(tmp_path):
    log_file = setup_rendering_logger(tmp_path, console_level="ERROR")

    log_render_start("abcd1234", is_markup=True, source_length=42, remote_enabled=False)
    logger.remove()

    text = log_file.read_text()
    assert "[render] Rendering markup (42 chars) [abcd1234]" in text
    assert "[render]   Remote stage: skipped" in text


@pytest.mark.unit
def test_parsing_logger_file_name(tmp_path):
    assert setup_parsing_logger(tmp_path).name == "parse.log"


@pytest.mark.unit
def test_generation_logger_file_name(tmp_path):
    assert setup_generation_logger(tmp_path).name == "generate.log"


@pytest.mark.unit
def test_request_id_tagged_on_records(tmp_path):
    log_file = setup_rendering_logger(tmp_path, console_level="ERROR")

    logger.info("outside")
    with request_context("abcd1234"):
        logger.info("inside")
    logger.remove()

    lines = log_file.read_text().splitlines()
    assert any(line.endswith(f"| {NO_REQUEST_ID} | outside") for line in lines)
    assert any(line.endswith("| abcd1234 | inside") for line in lines)


@pytest.mark.unit
def test_pipeline_records_carry_render_request_id(tmp_path, a4_layout):
    log_file = setup_rendering_logger(tmp_path, console_level="ERROR")

    result = RenderPipeline(None, *a4_layout).render("SUMMARY\nBuilt X", is_markup=False)
    logger.remove()

    tagged = [line for line in log_file.read_text().splitlines() if f"| {result.request_id} |" in line]
    assert any("[render] Rendering plain text" in line for line in tagged)
