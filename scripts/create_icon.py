#!/usr/bin/env python3
"""
Generate the Live Network app icon.
Writes assets/app.png, and assets/LiveNetwork.icns when iconutil is available (macOS).
"""
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path

from PIL import Image, ImageDraw

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import COLORS, STORAGE  # noqa: E402

# Icon sizes required for macOS icns
ICNS_SIZES = [16, 32, 128, 256, 512]

DOWN_COLOR = COLORS.GREEN_RGBA
UP_COLOR = (0, 122, 255, 255)


def _arrow(draw: ImageDraw.ImageDraw, cx: float, cy: float, size: float,
           pointing_up: bool, fill) -> None:
    """Draw a block arrow centered on (cx, cy)."""
    shaft_w = size * 0.28
    head_w = size * 0.7
    half = size / 2
    sign = -1 if pointing_up else 1
    tip_y = cy + sign * half
    base_y = cy - sign * half
    neck_y = cy + sign * (half - head_w * 0.75)

    draw.rectangle(
        [cx - shaft_w / 2, min(base_y, neck_y), cx + shaft_w / 2, max(base_y, neck_y)],
        fill=fill,
    )
    draw.polygon([(cx - head_w / 2, neck_y), (cx + head_w / 2, neck_y), (cx, tip_y)], fill=fill)


def create_app_icon(size: int) -> Image.Image:
    """Create the icon at the given size: a dark tile with ↓ and ↑ arrows."""
    # Draw at 4x and downsample for antialiasing
    scale = 4
    canvas = size * scale
    img = Image.new('RGBA', (canvas, canvas), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    padding = canvas * 0.08
    draw.rounded_rectangle(
        [padding, padding, canvas - padding, canvas - padding],
        radius=canvas * 0.2,
        fill=COLORS.BACKGROUND_RGBA,
    )

    arrow_size = canvas * 0.5
    _arrow(draw, canvas * 0.36, canvas * 0.5, arrow_size, pointing_up=False, fill=DOWN_COLOR)
    _arrow(draw, canvas * 0.64, canvas * 0.5, arrow_size, pointing_up=True, fill=UP_COLOR)

    return img.resize((size, size), Image.Resampling.LANCZOS)


def create_icns(output_path: Path) -> bool:
    """Build an .icns with iconutil. Returns False when iconutil is missing."""
    if shutil.which('iconutil') is None:
        return False

    with tempfile.TemporaryDirectory() as tmpdir:
        iconset_dir = Path(tmpdir) / "LiveNetwork.iconset"
        iconset_dir.mkdir()
        for size in ICNS_SIZES:
            create_app_icon(size).save(iconset_dir / f"icon_{size}x{size}.png")
            create_app_icon(size * 2).save(iconset_dir / f"icon_{size}x{size}@2x.png")

        subprocess.run(
            ['iconutil', '-c', 'icns', str(iconset_dir), '-o', str(output_path)],
            check=True,
            capture_output=True,
        )
    return True


def main() -> None:
    png_path = PROJECT_ROOT / STORAGE.APP_ICON_FILE
    png_path.parent.mkdir(parents=True, exist_ok=True)

    create_app_icon(256).save(png_path)
    print(f"Icon created: {png_path}")

    icns_path = png_path.parent / "LiveNetwork.icns"
    if create_icns(icns_path):
        print(f"Icon created: {icns_path}")


if __name__ == '__main__':
    main()
