"""Status display daemon: sample metrics, render, flush, repeat."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
import logging
from pathlib import Path
import signal
import sys
import threading
from typing import Callable

from connectcheck_oled.config import AppConfig, LoggingConfig, load_config
from connectcheck_oled.data import MetricsSampler, SystemSnapshot
from connectcheck_oled.display import (
    DisplayDevice,
    DisplayInitError,
    EmulatorDisplay,
    PanelGeometry,
    open_display,
)
from connectcheck_oled.rendering import Fonts, ScrollState, load_fonts, new_frame, render

logger = logging.getLogger("connectcheck_oled")

LOG_FILE_NAME = "connectcheck-oled.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


@dataclass
class DisplayContext:
    """Everything the loop needs, created once at startup."""

    device: DisplayDevice
    fonts: Fonts
    scroll: ScrollState
    port_label: int
    frame_delay_seconds: float


def configure_logging(config: LoggingConfig) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_dir:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8"))
    logging.basicConfig(level=config.level, format=LOG_FORMAT, handlers=handlers, force=True)


def build_context(config: AppConfig, device: DisplayDevice) -> DisplayContext:
    return DisplayContext(
        device=device,
        fonts=load_fonts(config.render.caption_font_path, config.render.caption_font_size),
        scroll=ScrollState.start(config.render.caption, config.render.scroll_speed, device.width),
        port_label=config.render.port_label,
        frame_delay_seconds=config.render.frame_delay_seconds,
    )


def draw_once(context: DisplayContext, snapshot: SystemSnapshot) -> None:
    """Render one snapshot into a fresh frame and push it to the device."""
    frame = new_frame(context.device.width, context.device.height)
    render(frame, snapshot, context.scroll, context.fonts, port_label=context.port_label)
    context.device.flush(frame)


def run_loop(
    context: DisplayContext,
    sample: Callable[[], SystemSnapshot],
    stop_event: threading.Event,
    max_frames: int | None = None,
) -> int:
    """Run until ``stop_event`` is set or ``max_frames`` have been drawn; returns frames drawn."""
    frames = 0
    while not stop_event.is_set():
        if max_frames is not None and frames >= max_frames:
            break
        draw_once(context, sample())
        frames += 1
        if max_frames is None or frames < max_frames:
            stop_event.wait(timeout=context.frame_delay_seconds)
    return frames


def clear_display(device: DisplayDevice) -> None:
    """Blank the panel on the way out; failure here only gets logged."""
    try:
        device.clear()
    except (OSError, RuntimeError) as exc:
        logger.warning("display_clear_failed %s", {"error": str(exc)})


def install_signal_handlers(stop_event: threading.Event) -> None:
    def _handle(signum: int, _frame: object) -> None:
        logger.info("stop_requested %s", {"signal": signal.Signals(signum).name})
        stop_event.set()

    signal.signal(signal.SIGTERM, _handle)
    signal.signal(signal.SIGINT, _handle)


def open_device(config: AppConfig, output: str, emulator_path: str | None) -> DisplayDevice:
    display = config.display
    if output == "emulator":
        return EmulatorDisplay(display.width, display.height, output_path=emulator_path)
    geometry = PanelGeometry(
        width=display.width,
        height=display.height,
        i2c_port=display.i2c_port,
        i2c_address=display.i2c_address,
        driver=display.driver,
        rotate=display.rotate,
    )
    return open_display(geometry, contrast=display.contrast)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show system status on an I2C OLED panel.")
    parser.add_argument("--config", default="config/config.yaml", help="Path to config YAML")
    parser.add_argument(
        "--output",
        choices=["hardware", "emulator"],
        default="hardware",
        help="Frame output target",
    )
    parser.add_argument(
        "--emulator-path",
        default="emulator_output/frame.png",
        help="PNG written by the emulator output",
    )
    parser.add_argument("--frames", type=_positive_int, default=None, help="Stop after this many frames")
    args = parser.parse_args(argv)

    try:
        return _run(args)
    except KeyboardInterrupt:
        return 0


def _run(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except ValueError as exc:
        logging.basicConfig(level=logging.ERROR, format=LOG_FORMAT)
        logger.error("config_error %s", {"error": str(exc)})
        return 1
    configure_logging(config.log)

    try:
        device = open_device(config, args.output, args.emulator_path)
    except DisplayInitError as exc:
        logger.error("display_init_failed %s", {"error": str(exc)})
        return 1

    context = build_context(config, device)
    sampler = MetricsSampler(config.sampler)
    stop_event = threading.Event()
    install_signal_handlers(stop_event)

    logger.info(
        "display_ready %s",
        {"output": args.output, "width": device.width, "height": device.height},
    )
    try:
        frames = run_loop(context, sampler.sample, stop_event, max_frames=args.frames)
    finally:
        clear_display(device)
    logger.info("display_stopped %s", {"frames": frames})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
