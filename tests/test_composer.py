from __future__ import annotations

import dataclasses
import math
from types import SimpleNamespace

import pytest
from PIL import Image, ImageDraw, ImageFont

from connectcheck_oled.data.sampler import BYTES_PER_GB, NO_NETWORK, SystemSnapshot
from connectcheck_oled.rendering.composer import (
    BAR_HEIGHT,
    DISPLAY_HEIGHT,
    DISPLAY_WIDTH,
    ROW_BAR,
    ROW_CAPTION,
    advance_scroll,
    bar_fill_width,
    centered_x,
    draw_status_bar,
    format_rows,
    new_frame,
    render,
    text_width,
)
from connectcheck_oled.rendering import frame_data
from connectcheck_oled.rendering.frame_data import Fonts, ScrollState, load_fonts

LONG_CAPTION = "ConnectCheck Companion Streamdeck V3 - system status marquee"
SHORT_CAPTION = "OK"


@pytest.fixture()
def fonts() -> Fonts:
    return load_fonts(None)


def _snapshot(load: float = 0.0, ip: str = NO_NETWORK, temp: float = 0.0) -> SystemSnapshot:
    return SystemSnapshot(
        ip_address=ip,
        cpu_temp_celsius=temp,
        cpu_load_percent=load,
        disk_used_bytes=BYTES_PER_GB,
        disk_total_bytes=32 * BYTES_PER_GB,
    )


def _bar_row(frame: Image.Image) -> list[int]:
    pixels = frame.load()
    y = ROW_BAR + BAR_HEIGHT // 2
    return [pixels[x, y] for x in range(frame.width)]


def test_new_frame_size_and_mode() -> None:
    frame = new_frame()
    assert frame.size == (DISPLAY_WIDTH, DISPLAY_HEIGHT)
    assert frame.mode == "1"


def test_format_rows_no_network_scenario() -> None:
    rows = format_rows(_snapshot())

    assert rows.ip == "IP: No Network:8000"
    assert rows.cpu == "CPU: 0.0°C 0%"
    assert rows.disk == "Disk: 1.0/32.0GB"


def test_format_rows_rounding() -> None:
    snapshot = SystemSnapshot("192.168.1.20", 48.26, 37.4, int(6.25 * BYTES_PER_GB), int(29.12 * BYTES_PER_GB))

    rows = format_rows(snapshot, port_label=9000)

    assert rows.ip == "IP: 192.168.1.20:9000"
    assert rows.cpu == "CPU: 48.3°C 37%"
    assert rows.disk == "Disk: 6.2/29.1GB"


@pytest.mark.parametrize("percent", [0, 0.5, 1, 12.5, 33.3, 50, 66.7, 99.2, 99.99, 100])
def test_bar_fill_width_floors(percent: float) -> None:
    assert bar_fill_width(percent, DISPLAY_WIDTH) == math.floor(percent / 100 * DISPLAY_WIDTH)


def test_bar_fill_width_clamps_out_of_range() -> None:
    assert bar_fill_width(-5, DISPLAY_WIDTH) == 0
    assert bar_fill_width(150, DISPLAY_WIDTH) == DISPLAY_WIDTH


def test_status_bar_empty_is_outline_only() -> None:
    frame = new_frame()
    filled = draw_status_bar(ImageDraw.Draw(frame), ROW_BAR, 0, DISPLAY_WIDTH)

    row = _bar_row(frame)
    assert filled == 0
    assert row[0] == 255
    assert row[-1] == 255
    assert all(value == 0 for value in row[1:-1])


def test_status_bar_full_is_solid_box() -> None:
    frame = new_frame()
    filled = draw_status_bar(ImageDraw.Draw(frame), ROW_BAR, 100, DISPLAY_WIDTH)

    pixels = frame.load()
    assert filled == DISPLAY_WIDTH
    for y in range(ROW_BAR, ROW_BAR + BAR_HEIGHT):
        assert all(pixels[x, y] == 255 for x in range(DISPLAY_WIDTH))
    assert all(pixels[x, ROW_BAR + BAR_HEIGHT] == 0 for x in range(DISPLAY_WIDTH))


def test_status_bar_half_fill() -> None:
    frame = new_frame()
    draw_status_bar(ImageDraw.Draw(frame), ROW_BAR, 50, DISPLAY_WIDTH)

    row = _bar_row(frame)
    assert all(value == 255 for value in row[:64])
    assert all(value == 0 for value in row[64:-1])
    assert row[-1] == 255


def test_render_matches_expected_layout(fonts: Fonts) -> None:
    frame = new_frame()
    scroll = ScrollState.start(SHORT_CAPTION, 2, DISPLAY_WIDTH)

    render(frame, _snapshot(), scroll, fonts)

    expected = new_frame()
    draw = ImageDraw.Draw(expected)
    draw.text((0, 0), "IP: No Network:8000", font=fonts.small, fill=255)
    draw.text((0, 10), "CPU: 0.0°C 0%", font=fonts.small, fill=255)
    draw_status_bar(draw, ROW_BAR, 0, DISPLAY_WIDTH)
    draw.text((0, 32), "Disk: 1.0/32.0GB", font=fonts.small, fill=255)
    x = centered_x(DISPLAY_WIDTH, text_width(SHORT_CAPTION, fonts.small))
    draw.text((x, ROW_CAPTION), SHORT_CAPTION, font=fonts.small, fill=255)
    assert frame.tobytes() == expected.tobytes()


def test_render_full_load_draws_solid_bar(fonts: Fonts) -> None:
    frame = new_frame()
    render(frame, _snapshot(load=100), ScrollState.start(SHORT_CAPTION, 2, DISPLAY_WIDTH), fonts)

    assert all(value == 255 for value in _bar_row(frame))


def test_render_overwrites_previous_contents(fonts: Fonts) -> None:
    frame = Image.new("1", (DISPLAY_WIDTH, DISPLAY_HEIGHT), 1)

    render(frame, _snapshot(), ScrollState.start(SHORT_CAPTION, 2, DISPLAY_WIDTH), fonts)

    pixels = frame.load()
    assert all(pixels[x, DISPLAY_HEIGHT - 1] == 0 for x in range(DISPLAY_WIDTH))


def test_render_does_not_modify_snapshot(fonts: Fonts) -> None:
    snapshot = _snapshot(load=42.0, ip="10.1.2.3", temp=55.5)
    before = dataclasses.replace(snapshot)

    render(new_frame(), snapshot, ScrollState.start(LONG_CAPTION, 2, DISPLAY_WIDTH), fonts)

    assert snapshot == before


def test_static_caption_never_moves_scroll_state(fonts: Fonts) -> None:
    assert text_width(SHORT_CAPTION, fonts.small) <= DISPLAY_WIDTH
    scroll = ScrollState.start(SHORT_CAPTION, 2, DISPLAY_WIDTH)
    frames = []

    for _ in range(5):
        frame = new_frame()
        render(frame, _snapshot(), scroll, fonts)
        frames.append(frame.tobytes())
        assert scroll.offset == DISPLAY_WIDTH

    assert len(set(frames)) == 1


def test_centered_x_formula_is_stable() -> None:
    assert centered_x(128, 40) == 44
    assert centered_x(128, 41.5) == 43
    assert centered_x(128, 128) == 0
    assert {centered_x(128, 37.25) for _ in range(10)} == {45}


def test_long_caption_scrolls_by_speed(fonts: Fonts) -> None:
    width = text_width(LONG_CAPTION, fonts.small)
    assert width > DISPLAY_WIDTH
    scroll = ScrollState.start(LONG_CAPTION, 2, DISPLAY_WIDTH)
    offsets = [scroll.offset]

    for _ in range(10):
        render(new_frame(), _snapshot(), scroll, fonts)
        offsets.append(scroll.offset)

    assert offsets == [DISPLAY_WIDTH - 2 * step for step in range(11)]


def test_long_caption_wraps_to_display_width(fonts: Fonts) -> None:
    width = text_width(LONG_CAPTION, fonts.small)
    scroll = ScrollState.start(LONG_CAPTION, 3, DISPLAY_WIDTH)
    previous = scroll.offset
    wrapped = False

    for _ in range(400):
        render(new_frame(), _snapshot(), scroll, fonts)
        if scroll.offset > previous:
            assert previous - 3 < -width
            assert scroll.offset == DISPLAY_WIDTH
            wrapped = True
            break
        assert scroll.offset == previous - 3
        assert scroll.offset >= -width
        previous = scroll.offset

    assert wrapped


def test_advance_scroll_wraps_only_when_fully_off_screen() -> None:
    scroll = ScrollState(text="x", speed_px_per_frame=2, offset=-8)

    advance_scroll(scroll, 10, DISPLAY_WIDTH)
    assert scroll.offset == -10

    advance_scroll(scroll, 10, DISPLAY_WIDTH)
    assert scroll.offset == DISPLAY_WIDTH


def test_advance_scroll_fractional_width() -> None:
    scroll = ScrollState(text="x", speed_px_per_frame=1, offset=-10)

    advance_scroll(scroll, 10.5, DISPLAY_WIDTH)
    assert scroll.offset == DISPLAY_WIDTH


def test_load_fonts_caption_falls_back_to_row_font(tmp_path) -> None:
    fonts = load_fonts(str(tmp_path / "missing.ttf"))

    assert fonts.caption is fonts.small


def test_load_fonts_opens_caption_truetype(tmp_path, monkeypatch) -> None:
    font_file = tmp_path / "Caption.ttf"
    font_file.write_bytes(b"")
    default_font = ImageFont.load_default()
    caption_font = ImageFont.load_default()
    opened = []
    fake = SimpleNamespace(
        load_default=lambda: default_font,
        truetype=lambda path, size: opened.append((path, size)) or caption_font,
    )
    monkeypatch.setattr(frame_data, "ImageFont", fake)

    fonts = load_fonts(str(font_file), 14)

    assert opened == [(str(font_file), 14)]
    assert fonts.small is default_font
    assert fonts.caption is caption_font


def test_render_draws_caption_with_caption_font(fonts: Fonts) -> None:
    big = ImageFont.load_default(size=20)
    caption_fonts = Fonts(small=fonts.small, caption=big)
    frame = new_frame()

    render(frame, _snapshot(), ScrollState.start(SHORT_CAPTION, 2, DISPLAY_WIDTH), caption_fonts)

    expected = new_frame()
    draw = ImageDraw.Draw(expected)
    draw.text((0, 0), "IP: No Network:8000", font=fonts.small, fill=255)
    draw.text((0, 10), "CPU: 0.0°C 0%", font=fonts.small, fill=255)
    draw_status_bar(draw, ROW_BAR, 0, DISPLAY_WIDTH)
    draw.text((0, 32), "Disk: 1.0/32.0GB", font=fonts.small, fill=255)
    x = centered_x(DISPLAY_WIDTH, text_width(SHORT_CAPTION, big))
    draw.text((x, ROW_CAPTION), SHORT_CAPTION, font=big, fill=255)
    assert frame.tobytes() == expected.tobytes()
