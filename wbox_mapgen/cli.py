# wbox_mapgen/cli.py
from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .core.config import load_stats_config
from .core.constants import DEFAULT_TILE_TYPE, UNMATCHED_REPORT_TOP_N, WBOX_EXTENSION
from .core.errors import MapGenError
from .export.image_exporters import write_tile_preview
from .export.wbox_exporters import write_document_json, write_wbox_bytes
from .pipeline import convert_image
from .setup_logging import setup_logging

logger = logging.getLogger(__name__)

# python run_converter.py map.png -c colors.tsv -o out/map.wbox --player-name Bob -t 10


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="wbox-mapgen",
        description="Convert an image into a WorldBox map save (.wbox)",
    )
    ap.add_argument("image", help="source image (png, jpg, bmp, ...)")
    ap.add_argument("-c", "--colors", help="color table: .json, .csv or .tsv (default: bundled table)")
    ap.add_argument("-o", "--output", help="output .wbox path (default: <image>.wbox)")
    ap.add_argument("--stats", help="JSON file with map stats (playerName, population, worldTime, ...)")
    ap.add_argument("--player-name", help="player name stored in mapStats")
    ap.add_argument("--population", type=int, help="population stored in mapStats")
    ap.add_argument("--world-time", type=int, help="world age in months")
    ap.add_argument("--deaths", type=int, help="deaths stored in mapStats")
    ap.add_argument("--creatures-born", type=int, help="creaturesBorn counter")
    ap.add_argument("-t", "--tolerance", type=int, help="color tolerance 0..100 (default 0: exact match only)")
    ap.add_argument("--fallback", default=DEFAULT_TILE_TYPE, help=f"tile for unmatched colors (default {DEFAULT_TILE_TYPE})")
    ap.add_argument("-j", "--workers", type=int, default=1, help="threads for pixel classification (default 1)")
    ap.add_argument("--preview", help="also write a PNG preview of the tile grid")
    ap.add_argument("--json", dest="json_out", help="also write the uncompressed document as JSON")
    ap.add_argument("--top", type=int, default=UNMATCHED_REPORT_TOP_N, help="unmatched colors to report (default 10)")
    ap.add_argument("--log-file", help="duplicate logs into this file")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return ap


def _stats_overrides(args: argparse.Namespace) -> Dict[str, object]:
    pairs = {
        "player_name": args.player_name,
        "population": args.population,
        "world_time": args.world_time,
        "deaths": args.deaths,
        "creatures_born": args.creatures_born,
        "tolerance_level": args.tolerance,
    }
    return {k: v for k, v in pairs.items() if v is not None}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    image_path = Path(args.image)
    out_path = Path(args.output) if args.output else image_path.with_suffix(WBOX_EXTENSION)

    try:
        stats = load_stats_config(args.stats, _stats_overrides(args))
        result = convert_image(
            image_path,
            color_table=args.colors,
            stats=stats,
            workers=args.workers,
            fallback=args.fallback,
            top_n=args.top,
        )
        # побочные файлы первыми: при их ошибке .wbox не создаётся
        if args.json_out:
            write_document_json(args.json_out, result.document)
        if args.preview:
            write_tile_preview(args.preview, result.grid, result.color_table)
        write_wbox_bytes(out_path, result.data)
    except MapGenError as e:
        logger.error("Обработка не удалась: %s", e)
        return 1

    print(
        f"ok: {image_path.name} -> {out_path}  "
        f"tiles {result.grid.width}x{result.grid.height} "
        f"({result.zone_width}x{result.zone_height} zones), {len(result.data)} bytes"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
