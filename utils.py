"""
Shared utilities for the Visitor Management System.
Handles paths & config, input validation, CSV export and visitor badges.
"""

import os
import csv
import re
import logging
from pathlib import Path
from datetime import datetime
from typing import Iterable, Optional

from PIL import Image, ImageDraw, ImageFont

from visitors import CURRENTLY_INSIDE, TableRow, VisitorRegistry, VisitorView, format_timestamp

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Paths & config
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent
DATA_DIR = Path(os.environ.get("VISITOR_DATA_DIR", PROJECT_ROOT / "data"))
EXPORT_DIR = DATA_DIR / "exports"
BADGE_DIR = DATA_DIR / "badges"

LOG_LEVEL = os.environ.get("VISITOR_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def ensure_dirs():
    """Create data directories if they do not exist."""
    EXPORT_DIR.mkdir(parents=True, exist_ok=True)
    BADGE_DIR.mkdir(parents=True, exist_ok=True)


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: Optional[str] = None) -> None:
    """Raises ValueError for a level name logging does not know."""
    level_name = (level or LOG_LEVEL).upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{level or LOG_LEVEL}'; choose from {', '.join(LOG_LEVELS)}.")
    logging.basicConfig(level=getattr(logging, level_name), format=LOG_FORMAT)


# ---------------------------------------------------------------------------
# Form validation (presentation concern; the registry accepts anything)
# ---------------------------------------------------------------------------


class EmptyField(ValueError):
    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(f"{' and '.join(fields)} cannot be empty.")


def require_fields(**fields: str) -> dict[str, str]:
    """
    Strip each value and fail on blanks.
    Keyword names are used as labels: require_fields(Name=..., Contact=...).
    """
    cleaned = {label: (value or "").strip() for label, value in fields.items()}
    missing = [label for label, value in cleaned.items() if not value]
    if missing:
        raise EmptyField(missing)
    return cleaned


# ---------------------------------------------------------------------------
# CSV export (write-only session snapshots)
# ---------------------------------------------------------------------------

TABLE_HEADERS = ["name", "contact_info", "check_in", "check_out"]
LOG_HEADERS = ["entry", "line"]


def export_table_csv(rows: Iterable[TableRow], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(TABLE_HEADERS)
        for row in rows:
            w.writerow(list(row))
    return path


def export_log_csv(lines: Iterable[str], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(LOG_HEADERS)
        for i, line in enumerate(lines, start=1):
            w.writerow([i, line])
    return path


def export_session(registry: VisitorRegistry, export_dir: Optional[Path] = None) -> tuple[Path, Path]:
    """Write the table and the activity log side by side. Returns (table_path, log_path)."""
    export_dir = Path(export_dir) if export_dir is not None else EXPORT_DIR
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    table_path = export_table_csv(registry.snapshot_table(), export_dir / f"visitors_{stamp}.csv")
    log_path = export_log_csv(registry.get_log(), export_dir / f"visitor_log_{stamp}.csv")
    logger.info("Exported session to %s", export_dir)
    return table_path, log_path


# ---------------------------------------------------------------------------
# Visitor badge (Pillow)
# ---------------------------------------------------------------------------

BADGE_SIZE = (360, 200)
BADGE_BG = "#ffffff"
BADGE_HEADER = "#0d9488"
BADGE_TEXT = "#1e293b"
BADGE_MUTED = "#64748b"


def render_badge(view: VisitorView, size: tuple[int, int] = BADGE_SIZE) -> Image.Image:
    width, height = size
    img = Image.new("RGB", size, BADGE_BG)
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default()
    header_h = max(24, height // 5)
    draw.rectangle([0, 0, width, header_h], fill=BADGE_HEADER)
    draw.text((12, header_h // 2 - 6), "VISITOR", fill="white", font=font)
    status = CURRENTLY_INSIDE if view.check_out_time is None else f"Out: {format_timestamp(view.check_out_time)}"
    lines = [
        (view.name, BADGE_TEXT),
        (view.contact_info, BADGE_MUTED),
        (f"In: {format_timestamp(view.check_in_time)}", BADGE_MUTED),
        (status, BADGE_MUTED),
    ]
    y = header_h + 14
    for text, color in lines:
        draw.text((12, y), text, fill=color, font=font)
        y += 22
    draw.rectangle([0, 0, width - 1, height - 1], outline=BADGE_MUTED)
    return img


def badge_filename(view: VisitorView) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "_", view.name).strip("_").lower() or "visitor"
    return f"{slug}_{view.check_in_time.strftime('%Y%m%d_%H%M%S')}.png"


def save_badge(view: VisitorView, directory: Optional[Path] = None) -> Path:
    directory = Path(directory) if directory is not None else BADGE_DIR
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / badge_filename(view)
    render_badge(view).save(path, format="PNG")
    return path
