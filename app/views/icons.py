"""Icon generation for Live Network.

Draws the status dot shown next to the throughput text and resolves the
application icon. Generated icons are cached per color and size.

Usage:
    from app.views.icons import IconGenerator

    icons = IconGenerator()
    path = icons.create_status_icon("green")
"""
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import Image, ImageDraw

from config import COLORS, STORAGE, UI, get_logger

logger = get_logger(__name__)

# Status icon color per health state
HEALTHY_COLOR = "green"
DEGRADED_COLOR = "gray"

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class IconGenerator:
    """Generates and caches icons for the status display."""

    def __init__(self, temp_dir: Optional[Path] = None):
        self._temp_dir = temp_dir or Path(tempfile.gettempdir()) / STORAGE.ICON_TEMP_DIR
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        self._cache: Dict[str, str] = {}
        logger.debug(f"IconGenerator initialized, temp dir: {self._temp_dir}")

    def _get_color_rgba(self, color: str) -> Tuple[int, int, int, int]:
        color_map = {
            'green': COLORS.GREEN_RGBA,
            'gray': COLORS.GRAY_RGBA,
            'red': COLORS.RED_RGBA,
        }
        return color_map.get(color, COLORS.GRAY_RGBA)

    def create_status_icon(self, color: str, size: Optional[int] = None) -> str:
        """Create a colored circle icon for status display.

        Args:
            color: Color name ('green', 'gray', 'red').
            size: Icon size in pixels (default from UI config).

        Returns:
            Path to the generated PNG file.
        """
        size = size or UI.STATUS_ICON_SIZE
        cache_key = f"status_{color}_{size}"

        if cache_key in self._cache:
            return self._cache[cache_key]

        img = Image.new('RGBA', (size, size), (0, 0, 0, 0))
        draw = ImageDraw.Draw(img)

        padding = 2
        draw.ellipse(
            [padding, padding, size - padding, size - padding],
            fill=self._get_color_rgba(color)
        )

        icon_path = self._temp_dir / f'{cache_key}.png'
        img.save(icon_path, 'PNG')

        self._cache[cache_key] = str(icon_path)
        return str(icon_path)

    def icon_for_health(self, healthy: bool) -> str:
        return self.create_status_icon(HEALTHY_COLOR if healthy else DEGRADED_COLOR)

    def resolve_app_icon(self, base_dir: Optional[Path] = None) -> str:
        """Return the bundled application icon, or a generated one.

        A bundled icon that exists but cannot be opened is logged and
        replaced by the generated icon.
        """
        icon_file = (base_dir or PROJECT_ROOT) / STORAGE.APP_ICON_FILE
        if icon_file.exists():
            try:
                with Image.open(icon_file) as img:
                    img.verify()
                return str(icon_file)
            except (OSError, SyntaxError) as e:
                logger.warning(f"Could not load application icon {icon_file}: {e}")
        return self.create_status_icon(HEALTHY_COLOR, UI.APP_ICON_SIZE)

    def cleanup(self) -> None:
        """Clean up temporary icon files."""
        try:
            if self._temp_dir.exists():
                shutil.rmtree(self._temp_dir)
            self._temp_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not clean up {self._temp_dir}: {e}")

        self._cache.clear()
        logger.debug("Icon cache cleared")
