"""Rendering utilities for the OLED status panel."""

from connectcheck_oled.rendering.composer import new_frame, render
from connectcheck_oled.rendering.frame_data import Fonts, RowText, ScrollState, load_fonts

__all__ = ["Fonts", "RowText", "ScrollState", "load_fonts", "new_frame", "render"]
