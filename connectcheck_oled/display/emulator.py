"""In-memory panel stand-in with optional PNG output."""

from __future__ import annotations

from pathlib import Path

from PIL import Image


def save_frame(image: Image.Image, path: str = "emulator_output/frame.png") -> None:
    """Save a frame to disk as a PNG image."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(output_path, format="PNG")


class EmulatorDisplay:
    """Capture flushed frames instead of driving hardware."""

    def __init__(self, width: int = 128, height: int = 64, output_path: str | None = None) -> None:
        self._width = width
        self._height = height
        self._output_path = output_path
        self.frames: list[Image.Image] = []
        self.clear_count = 0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def last_frame(self) -> Image.Image | None:
        return self.frames[-1] if self.frames else None

    def clear(self) -> None:
        self.clear_count += 1
        blank = Image.new("1", (self._width, self._height), 0)
        self.frames.append(blank)
        if self._output_path:
            save_frame(blank, self._output_path)

    def flush(self, frame: Image.Image) -> None:
        if frame.size != (self._width, self._height):
            raise ValueError(
                "Frame size mismatch. "
                f"Expected {(self._width, self._height)}, got {frame.size}."
            )
        self.frames.append(frame.copy())
        if self._output_path:
            save_frame(frame, self._output_path)


__all__ = ["EmulatorDisplay", "save_frame"]
