"""Hardware output driver for SSD1306/SH1106 OLED panels via luma.oled."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from PIL import Image


class DisplayInitError(RuntimeError):
    """Raised when the panel cannot be opened on the configured bus and address."""


class DisplayDevice(Protocol):
    """Minimal capability the render loop needs from a panel."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def clear(self) -> None: ...

    def flush(self, frame: Image.Image) -> None: ...


@dataclass(frozen=True)
class PanelGeometry:
    """Panel size and wiring used for device setup."""

    width: int = 128
    height: int = 64
    i2c_port: int = 1
    i2c_address: int = 0x3C
    driver: str = "ssd1306"
    rotate: int = 0


class OledDisplay:
    """Push monochrome PIL frames to an I2C OLED panel."""

    def __init__(self, geometry: PanelGeometry, contrast: int | None = None) -> None:
        try:
            from luma.core.error import Error as LumaError
            from luma.core.interface.serial import i2c
            from luma.oled import device as oled_devices
        except ImportError as exc:
            raise DisplayInitError(
                "Hardware display requires 'luma.oled'. Install with the 'hardware' extra."
            ) from exc

        driver_cls = getattr(oled_devices, geometry.driver, None)
        if driver_cls is None:
            raise DisplayInitError(f"Unknown OLED driver '{geometry.driver}'.")

        try:
            serial = i2c(port=geometry.i2c_port, address=geometry.i2c_address)
            self._device = driver_cls(
                serial,
                width=geometry.width,
                height=geometry.height,
                rotate=geometry.rotate,
            )
            if contrast is not None:
                self._device.contrast(contrast)
        except (LumaError, OSError) as exc:
            raise DisplayInitError(
                f"Failed to initialize OLED display on i2c-{geometry.i2c_port} "
                f"at 0x{geometry.i2c_address:02X}: {exc}"
            ) from exc

        self._geometry = geometry

    @property
    def width(self) -> int:
        return self._device.width

    @property
    def height(self) -> int:
        return self._device.height

    def clear(self) -> None:
        self._device.clear()

    def flush(self, frame: Image.Image) -> None:
        """Send a frame to the panel."""
        if frame.size != (self.width, self.height):
            raise ValueError(
                "Frame size mismatch. "
                f"Expected {(self.width, self.height)}, got {frame.size}."
            )
        self._device.display(frame.convert("1"))


def open_display(geometry: PanelGeometry, contrast: int | None = None) -> OledDisplay:
    """Open the panel, raising DisplayInitError if it is not reachable."""
    return OledDisplay(geometry, contrast=contrast)


__all__ = ["DisplayDevice", "DisplayInitError", "OledDisplay", "PanelGeometry", "open_display"]
