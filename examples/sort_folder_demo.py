"""
Headless demonstration of the color sorting pipeline.

Uploads every PNG/JPEG in a folder (or a generated set of sample swatches
when no folder is given), sorts them by weight and hue and writes the
composited grid next to the inputs.

Usage:
    python examples/sort_folder_demo.py [folder] [--rows N] [--cols N] [--gap N] [--desc]
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import argparse
import colorsys
import logging
import tempfile

from PIL import Image

from CS_Libs.ColorLib.hsl_converter import rgb_to_hsl
from CS_Libs.ImageLib.image_models import GridConfig, HueDirection
from CS_Libs.ImageLib.ingestion import is_supported_extension
from CS_Libs.errors import ColorSorterError
from CS_Libs.session import ColorSorterSession


def write_sample_swatches(folder: Path, count: int = 12) -> None:
    """Write `count` swatches evenly spaced around the color wheel, shuffled by name."""
    for i in range(count):
        hue = ((i * 5) % count) / count
        r, g, b = (int(channel * 255) for channel in colorsys.hsv_to_rgb(hue, 0.8, 0.9))
        swatch = Image.new("RGB", (120, 80), (r, g, b))
        # white border: excluded from dominant color extraction
        framed = Image.new("RGB", (140, 100), (255, 255, 255))
        framed.paste(swatch, (10, 10))
        framed.save(folder / f"swatch_{i:02d}.png")


def main() -> int:
    parser = argparse.ArgumentParser(description="Sort images by dominant color and export a grid")
    parser.add_argument("folder", nargs="?", help="Folder with PNG/JPEG images")
    parser.add_argument("--rows", type=int, default=3)
    parser.add_argument("--cols", type=int, default=4)
    parser.add_argument("--gap", type=int, default=10)
    parser.add_argument("--desc", action="store_true", help="Sort hue descending")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.folder:
        folder = Path(args.folder)
    else:
        folder = Path(tempfile.mkdtemp(prefix="color_sorter_demo_"))
        write_sample_swatches(folder)
        print(f"Generated sample swatches in {folder}")

    direction = HueDirection.DESCENDING if args.desc else HueDirection.ASCENDING
    try:
        session = ColorSorterSession(GridConfig(rows=args.rows, cols=args.cols, gap=args.gap, hue_direction=direction))
        paths = sorted(path for path in folder.iterdir() if is_supported_extension(path))
        result = session.ingest_paths(paths)
        for name, error in result.errors:
            print(f"  skipped {name}: {error}")

        print("\nSorted order:")
        for record in session.process():
            hue, saturation, lightness = rgb_to_hsl(*record.color)
            print(f"  {record.name:<24} weight={record.weight} color={record.color} hue={hue:6.1f}")

        output_file = session.export(folder)
    except (ColorSorterError, OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print(f"\nExported grid to {output_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
