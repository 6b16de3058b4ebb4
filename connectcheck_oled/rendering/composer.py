"""Frame composer for the 128x64 monochrome OLED."""

from __future__ import annotations

import math

from PIL import Image, ImageDraw

from connectcheck_oled.data.sampler import SystemSnapshot
from connectcheck_oled.rendering.frame_data import Font, Fonts, RowText, ScrollState

DISPLAY_WIDTH = 128
DISPLAY_HEIGHT = 64
FRAME_MODE = "1"

ROW_IP = 0
ROW_CPU = 10
ROW_BAR = 22
ROW_DISK = 32
ROW_CAPTION = 44

BAR_HEIGHT = 6

DEFAULT_PORT_LABEL = 8000

ON = 255
OFF = 0


def new_frame(width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT) -> Image.Image:
    """Blank monochrome frame sized to the panel."""
    return Image.new(FRAME_MODE, (width, height), OFF)


def format_rows(snapshot: SystemSnapshot, port_label: int = DEFAULT_PORT_LABEL) -> RowText:
    return RowText(
        ip=f"IP: {snapshot.ip_address}:{port_label}",
        cpu=f"CPU: {snapshot.cpu_temp_celsius:.1f}°C {snapshot.cpu_load_percent:.0f}%",
        disk=f"Disk: {snapshot.disk_used_gb:.1f}/{snapshot.disk_total_gb:.1f}GB",
    )


def bar_fill_width(percent: float, track_width: int) -> int:
    """Filled pixels for a percentage, floored and clamped to the track."""
    filled = math.floor(percent / 100.0 * track_width)
    return max(0, min(track_width, filled))


def text_width(text: str, font: Font) -> float:
    """Rendered width of ``text`` as drawn on a monochrome frame."""
    return ImageDraw.Draw(Image.new(FRAME_MODE, (1, 1))).textlength(text, font=font)


def centered_x(display_width: int, width: float) -> int:
    return int((display_width - width) // 2)


def advance_scroll(scroll: ScrollState, width: float, display_width: int) -> None:
    """Step the marquee left; once fully off-screen it re-enters from the right edge."""
    scroll.offset -= scroll.speed_px_per_frame
    if scroll.offset < -width:
        scroll.offset = display_width


def draw_status_bar(
    draw: ImageDraw.ImageDraw,
    y: int,
    percent: float,
    track_width: int,
    height: int = BAR_HEIGHT,
) -> int:
    """Draw an outlined track with a solid fill from the left; returns the fill width."""
    bottom = y + height - 1
    draw.rectangle((0, y, track_width - 1, bottom), outline=ON, fill=OFF)
    filled = bar_fill_width(percent, track_width)
    if filled > 0:
        draw.rectangle((0, y, filled - 1, bottom), outline=ON, fill=ON)
    return filled


def _draw_caption(draw: ImageDraw.ImageDraw, scroll: ScrollState, font: Font, display_width: int) -> None:
    width = text_width(scroll.text, font)
    if width > display_width:
        draw.text((scroll.offset, ROW_CAPTION), scroll.text, font=font, fill=ON)
        advance_scroll(scroll, width, display_width)
    else:
        draw.text((centered_x(display_width, width), ROW_CAPTION), scroll.text, font=font, fill=ON)


def render(
    frame: Image.Image,
    snapshot: SystemSnapshot,
    scroll: ScrollState,
    fonts: Fonts,
    port_label: int = DEFAULT_PORT_LABEL,
) -> None:
    """Overwrite ``frame`` with the status layout and advance the marquee one step."""
    width, height = frame.size
    draw = ImageDraw.Draw(frame)
    draw.rectangle((0, 0, width - 1, height - 1), fill=OFF)

    rows = format_rows(snapshot, port_label)
    font = fonts.small
    draw.text((0, ROW_IP), rows.ip, font=font, fill=ON)
    draw.text((0, ROW_CPU), rows.cpu, font=font, fill=ON)
    draw_status_bar(draw, ROW_BAR, snapshot.cpu_load_percent, width)
    draw.text((0, ROW_DISK), rows.disk, font=font, fill=ON)
    _draw_caption(draw, scroll, fonts.caption, width)


__all__ = [
    "BAR_HEIGHT",
    "DISPLAY_HEIGHT",
    "DISPLAY_WIDTH",
    "ROW_BAR",
    "ROW_CAPTION",
    "advance_scroll",
    "bar_fill_width",
    "centered_x",
    "draw_status_bar",
    "format_rows",
    "new_frame",
    "render",
    "text_width",
]
