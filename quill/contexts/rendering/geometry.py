"""
Page geometry and typography configuration.

Layout values come from the packaged layout.yaml, optionally merged with a
user YAML (QUILL_LAYOUT_CONFIG) and explicit overrides, all through OmegaConf.
Coordinates use a top-down y axis in PDF points: y grows down the page.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf
from reportlab.lib.pagesizes import A4, LEGAL, LETTER

load_dotenv()

PAGE_SIZE = os.getenv("PAGE_SIZE")
LAYOUT_CONFIG_PATH = os.getenv("QUILL_LAYOUT_CONFIG")

PACKAGED_LAYOUT_PATH = Path(__file__).parent / "layout.yaml"

PAGE_SIZES = {
    "A4": A4,
    "LETTER": LETTER,
    "LEGAL": LEGAL,
}

# Standard PDF fonts by family: (regular, bold, italic, bold italic)
FONT_FACES = {
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}


@dataclass(frozen=True)
class PageGeometry:
    """
    Page dimensions and content limits.

    Attributes:
        width: Page width
        height: Page height
        margin: Left and right margin
        top_margin: Cursor y at the top of every page
        max_content_y: Nothing is drawn below this y
    """

    width: float
    height: float
    margin: float
    top_margin: float
    max_content_y: float

    def __post_init__(self):
        if self.column_width <= 0:
            raise ValueError(f"Margins leave no column width (width={self.width}, margin={self.margin})")
        if not self.top_margin < self.max_content_y <= self.height:
            raise ValueError(
                f"max_content_y must lie between top_margin and height, got {self.max_content_y}"
            )

    @property
    def column_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def right_edge(self) -> float:
        return self.width - self.margin

    @property
    def center_x(self) -> float:
        return self.width / 2


@dataclass(frozen=True)
class Typography:
    """Font family, sizes and spacing used by the renderer."""

    font_family: str = "Helvetica"
    name_size: float = 20
    contact_size: float = 10
    section_size: float = 14
    body_size: float = 11
    line_height_factor: float = 1.2
    header_gap: float = 10
    section_gap: float = 8
    title_gap: float = 4
    rule_offset: float = 4
    rule_width: float = 0.5
    bullet_indent: float = 14.17
    bullet_marker: str = "•"
    two_column_gap: float = 12
    empty_section_text: str = "No information provided"

    def __post_init__(self):
        if self.font_family not in FONT_FACES:
            raise ValueError(
                f"Unsupported font family: {self.font_family} (choose from {', '.join(FONT_FACES)})"
            )

    def line_height(self, size: float) -> float:
        return size * self.line_height_factor


def page_dimensions(page_size: str) -> Tuple[float, float]:
    """
    Look up (width, height) for a named page size.

    Raises:
        ValueError: If the page size is unknown
    """
    key = page_size.strip().upper()
    if key not in PAGE_SIZES:
        raise ValueError(f"Unknown page size: {page_size} (choose from {', '.join(PAGE_SIZES)})")
    return PAGE_SIZES[key]


def load_layout_config(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> DictConfig:
    """
    Load the layout config: packaged defaults, then a user YAML, then overrides.

    Args:
        config_path: YAML file merged over the defaults (defaults to QUILL_LAYOUT_CONFIG)
        overrides: Nested dict merged last (e.g., {"typography": {"body_size": 10}})

    Returns:
        Merged OmegaConf config with 'page' and 'typography' sections
    """
    config = OmegaConf.load(PACKAGED_LAYOUT_PATH)

    user_path = config_path or LAYOUT_CONFIG_PATH
    if user_path:
        config = OmegaConf.merge(config, OmegaConf.load(user_path))

    if overrides:
        config = OmegaConf.merge(config, OmegaConf.create(overrides))

    return config


def load_layout(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
    page_size: Optional[str] = None,
) -> Tuple[PageGeometry, Typography]:
    """
    Build PageGeometry and Typography from the layout config.

    Page size precedence: page_size argument, then PAGE_SIZE, then the config.

    Example:
        >>> geometry, typography = load_layout(page_size="LETTER")
        >>> geometry.width, geometry.height
        (612.0, 792.0)
    """
    config = load_layout_config(config_path, overrides)
    page = config.page

    width, height = page_dimensions(page_size or PAGE_SIZE or page.size)
    geometry = PageGeometry(
        width=float(width),
        height=float(height),
        margin=float(page.margin),
        top_margin=float(page.top_margin),
        max_content_y=float(height) - float(page.bottom_margin),
    )
    typography = Typography(**OmegaConf.to_container(config.typography, resolve=True))

    return geometry, typography
