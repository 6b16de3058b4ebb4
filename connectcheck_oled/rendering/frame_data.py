"""Data structures for rendering frames."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from PIL import ImageFont

Font = Union[ImageFont.ImageFont, ImageFont.FreeTypeFont]


@dataclass(frozen=True)
class RowText:
    """Text lines of the fixed layout for one snapshot."""

    ip: str
    cpu: str
    disk: str


@dataclass
class ScrollState:
    """Marquee position for the caption; lives as long as the process."""

    text: str
    speed_px_per_frame: int
    offset: int

    @classmethod
    def start(cls, text: str, speed_px_per_frame: int, display_width: int) -> ScrollState:
        """Place the caption just past the right edge."""
        return cls(text=text, speed_px_per_frame=speed_px_per_frame, offset=display_width)


@dataclass(frozen=True)
class Fonts:
    """Font handles used by the renderer: metric rows and the caption line."""

    small: Font
    caption: Font


def load_fonts(caption_font_path: str | None = None, caption_size: int = 12) -> Fonts:
    """Load the layout fonts; the caption uses the row font unless a TrueType file is given."""
    small = ImageFont.load_default()
    if caption_font_path and Path(caption_font_path).exists():
        caption = ImageFont.truetype(caption_font_path, caption_size)
    else:
        caption = small
    return Fonts(small=small, caption=caption)


__all__ = ["Font", "Fonts", "RowText", "ScrollState", "load_fonts"]
