"""Render preview frames of the status layout without a panel attached."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from connectcheck_oled.config import SamplerConfig
from connectcheck_oled.data.sampler import BYTES_PER_GB, MetricsSampler, SystemSnapshot
from connectcheck_oled.display import save_frame
from connectcheck_oled.rendering import ScrollState, load_fonts, new_frame, render


def _fixed_snapshot(args: argparse.Namespace) -> SystemSnapshot:
    return SystemSnapshot(
        ip_address=args.ip,
        cpu_temp_celsius=args.temp,
        cpu_load_percent=args.load,
        disk_used_bytes=int(args.disk_used_gb * BYTES_PER_GB),
        disk_total_bytes=int(args.disk_total_gb * BYTES_PER_GB),
    )


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--live", action="store_true", help="Sample this machine instead of fixed values")
    parser.add_argument("--ip", default="192.168.1.50")
    parser.add_argument("--temp", type=float, default=48.3)
    parser.add_argument("--load", type=float, default=37.0)
    parser.add_argument("--disk-used-gb", type=float, default=6.2)
    parser.add_argument("--disk-total-gb", type=float, default=29.1)
    parser.add_argument("--caption", default="ConnectCheck Companion Streamdeck V3")
    parser.add_argument("--frames", type=int, default=1, help="Frames to step the marquee through")
    parser.add_argument("--output", default="emulator_output/preview.png")
    args = parser.parse_args()

    snapshot = MetricsSampler(SamplerConfig()).sample() if args.live else _fixed_snapshot(args)
    fonts = load_fonts()
    frame = new_frame()
    scroll = ScrollState.start(args.caption, 2, frame.width)

    output = Path(args.output)
    for index in range(max(1, args.frames)):
        render(frame, snapshot, scroll, fonts)
        path = output if args.frames <= 1 else output.with_name(f"{output.stem}_{index:03d}{output.suffix}")
        save_frame(frame.resize((frame.width * 4, frame.height * 4)), str(path))

    print("preview_saved", {"output": str(output), "frames": max(1, args.frames)}, flush=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
