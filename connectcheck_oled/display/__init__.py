"""Display output adapters."""

from connectcheck_oled.display.emulator import EmulatorDisplay, save_frame
from connectcheck_oled.display.hardware import (
    DisplayDevice,
    DisplayInitError,
    OledDisplay,
    PanelGeometry,
    open_display,
)

__all__ = [
    "DisplayDevice",
    "DisplayInitError",
    "EmulatorDisplay",
    "OledDisplay",
    "PanelGeometry",
    "open_display",
    "save_frame",
]
