"""Configuration loader for the ConnectCheck OLED status display."""

from __future__ import annotations

from dataclasses import dataclass, fields
import logging
import os
from typing import Any

from dotenv import find_dotenv, load_dotenv
import yaml

SUPPORTED_DRIVERS = ("ssd1306", "sh1106")
MAX_PROBE_TIMEOUT_SECONDS = 0.5


@dataclass(frozen=True)
class DisplayConfig:
    """Panel geometry and I2C wiring."""

    width: int
    height: int
    i2c_port: int
    i2c_address: int
    driver: str = "ssd1306"
    rotate: int = 0
    contrast: int | None = None


@dataclass(frozen=True)
class RenderConfig:
    """Layout text and animation cadence."""

    caption: str = "ConnectCheck Companion Streamdeck V3"
    port_label: int = 8000
    scroll_speed: int = 2
    frame_delay_seconds: float = 0.1
    caption_font_path: str | None = None
    caption_font_size: int = 12


@dataclass(frozen=True)
class SamplerConfig:
    """Where and how system metrics are read."""

    probe_host: str = "8.8.8.8"
    probe_port: int = 80
    probe_timeout_seconds: float = 0.1
    thermal_path: str = "/sys/class/thermal/thermal_zone0/temp"
    disk_path: str = "/"
    cpu_interval_seconds: float = 0.1


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    log_dir: str | None = None


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    display: DisplayConfig
    render: RenderConfig
    sampler: SamplerConfig
    log: LoggingConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _section(data: dict[str, Any], name: str, required: bool = False) -> dict[str, Any]:
    if required:
        section = _require_key(data, name, name)
    else:
        section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' config must be a mapping")
    return section


def _build_section(cls: type, section: dict[str, Any], context: str) -> Any:
    known = {field.name for field in fields(cls)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ValueError(f"Unknown key(s) {', '.join(unknown)} in {context} config")
    return cls(**section)


def _parse_address(value: Any) -> int:
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip(), 0)
    except ValueError as exc:
        raise ValueError(f"Invalid I2C address: {value!r}") from exc


def _check_type(value: Any, expected: tuple[type, ...], name: str, optional: bool = False) -> None:
    if value is None and optional:
        return
    if isinstance(value, bool) or not isinstance(value, expected):
        kinds = " or ".join(kind.__name__ for kind in expected)
        raise ValueError(f"'{name}' must be {kinds}, got {value!r}")


def _check_types(config: AppConfig) -> None:
    number = (int, float)
    display, render, sampler = config.display, config.render, config.sampler
    for name in ("width", "height", "i2c_port", "rotate"):
        _check_type(getattr(display, name), (int,), f"display.{name}")
    _check_type(display.contrast, (int,), "display.contrast", optional=True)
    _check_type(display.driver, (str,), "display.driver")
    _check_type(render.caption, (str,), "render.caption")
    _check_type(render.port_label, (int, str), "render.port_label")
    _check_type(render.scroll_speed, (int,), "render.scroll_speed")
    _check_type(render.frame_delay_seconds, number, "render.frame_delay_seconds")
    _check_type(render.caption_font_path, (str,), "render.caption_font_path", optional=True)
    _check_type(render.caption_font_size, (int,), "render.caption_font_size")
    for name in ("probe_host", "thermal_path", "disk_path"):
        _check_type(getattr(sampler, name), (str,), f"sampler.{name}")
    _check_type(sampler.probe_port, (int,), "sampler.probe_port")
    _check_type(sampler.probe_timeout_seconds, number, "sampler.probe_timeout_seconds")
    _check_type(sampler.cpu_interval_seconds, number, "sampler.cpu_interval_seconds")
    _check_type(config.log.log_dir, (str,), "logging.log_dir", optional=True)


def _validate(config: AppConfig) -> None:
    _check_types(config)
    if not isinstance(logging.getLevelName(config.log.level), int):
        raise ValueError(f"Unknown logging level '{config.log.level}'.")
    display = config.display
    if display.width <= 0 or display.height <= 0:
        raise ValueError(
            f"Display size must be positive, got {display.width}x{display.height}."
        )
    if display.driver not in SUPPORTED_DRIVERS:
        raise ValueError(
            f"Unsupported display driver '{display.driver}'. "
            f"Use one of: {', '.join(SUPPORTED_DRIVERS)}."
        )
    if display.rotate not in (0, 1, 2, 3):
        raise ValueError(f"Rotate must be 0-3, got {display.rotate}.")
    if display.contrast is not None and not 0 <= display.contrast <= 255:
        raise ValueError(f"Contrast must be 0-255, got {display.contrast}.")
    if config.render.scroll_speed < 1:
        raise ValueError(f"Scroll speed must be at least 1, got {config.render.scroll_speed}.")
    if config.render.frame_delay_seconds < 0:
        raise ValueError("Frame delay must not be negative.")
    if config.render.caption_font_size < 1:
        raise ValueError(f"Caption font size must be positive, got {config.render.caption_font_size}.")
    if config.sampler.cpu_interval_seconds < 0:
        raise ValueError("CPU sample interval must not be negative.")
    timeout = config.sampler.probe_timeout_seconds
    if not 0 < timeout <= MAX_PROBE_TIMEOUT_SECONDS:
        raise ValueError(
            f"Probe timeout must be in (0, {MAX_PROBE_TIMEOUT_SECONDS}], got {timeout}."
        )


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from a YAML file."""
    load_dotenv(find_dotenv(usecwd=True))
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    display_section = _section(data, "display", required=True)
    render_section = _section(data, "render")
    sampler_section = _section(data, "sampler")
    logging_section = _section(data, "logging")

    address = _require_key(display_section, "i2c_address", "display")
    address_override = os.environ.get("OLED_I2C_ADDRESS", "").strip()
    if address_override:
        address = address_override

    display = DisplayConfig(
        width=_require_key(display_section, "width", "display"),
        height=_require_key(display_section, "height", "display"),
        i2c_port=_require_key(display_section, "i2c_port", "display"),
        i2c_address=_parse_address(address),
        driver=display_section.get("driver", DisplayConfig.driver),
        rotate=display_section.get("rotate", DisplayConfig.rotate),
        contrast=display_section.get("contrast", DisplayConfig.contrast),
    )

    render = _build_section(RenderConfig, render_section, "render")
    sampler = _build_section(SamplerConfig, sampler_section, "sampler")
    log_config = LoggingConfig(
        level=str(logging_section.get("level", LoggingConfig.level)).upper(),
        log_dir=logging_section.get("log_dir") or None,
    )

    config = AppConfig(display=display, render=render, sampler=sampler, log=log_config)
    _validate(config)
    return config


__all__ = [
    "AppConfig",
    "DisplayConfig",
    "LoggingConfig",
    "RenderConfig",
    "SamplerConfig",
    "load_config",
]
