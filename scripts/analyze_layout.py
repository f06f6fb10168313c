#!/usr/bin/env python3
"""Analyze how a set of content blocks fits a printable study sheet.

Reads content blocks (and optionally extracted topics) from JSON, runs the
layout engine and prints the overflow analysis, warnings and, on request,
the per-block fit report and print stylesheet as JSON.

Usage:
    python scripts/analyze_layout.py blocks.json [--topics topics.json]
        [--paper a4] [--orientation portrait] [--columns 2]
        [--text-size medium] [--max-pages 2] [--select topic-1 ...]
        [--max-reduction 40] [--detailed] [--css]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add src to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from studysheet.core.utils import (
    SerializationError,
    dumps,
    load_blocks_json,
    load_topics_json,
)
from studysheet.layout import (
    LayoutConfig,
    LayoutEngine,
    PageGeometryConfig,
    PrioritizationConfig,
)
from studysheet.layout.config import ORIENTATIONS, PAPER_SIZES, TEXT_SIZES
from studysheet.layout.typography import text_profile

logger = logging.getLogger("analyze_layout")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze study-sheet layout and overflow")
    parser.add_argument("blocks", type=Path, help="JSON file with content blocks")
    parser.add_argument("--topics", type=Path, help="JSON file with extracted topics")
    parser.add_argument("--paper", choices=PAPER_SIZES, default="a4")
    parser.add_argument("--orientation", choices=ORIENTATIONS, default="portrait")
    parser.add_argument("--columns", type=int, default=2)
    parser.add_argument("--text-size", choices=TEXT_SIZES, default="medium")
    parser.add_argument("--max-pages", type=int, default=2)
    parser.add_argument("--select", nargs="*", default=[], metavar="TOPIC_ID",
                        help="Topic ids the user selected")
    parser.add_argument("--max-reduction", type=float, default=40,
                        help="Maximum content reduction in percent")
    parser.add_argument("--detailed", action="store_true", help="Include the per-block fit report")
    parser.add_argument("--css", action="store_true", help="Include the print stylesheet")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = LayoutConfig(
            page=PageGeometryConfig(
                paper_size=args.paper,
                orientation=args.orientation,
                columns=args.columns,
            ),
            text=text_profile(args.text_size),
            max_pages=args.max_pages,
            prioritization=PrioritizationConfig(
                user_selected_topics=tuple(args.select),
                max_content_reduction=args.max_reduction,
            ),
        )
        blocks = load_blocks_json(args.blocks)
        topics = load_topics_json(args.topics) if args.topics else None
    except (SerializationError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    engine = LayoutEngine(config)
    report = {
        "config_warnings": engine.validate_config(),
        "analysis": engine.analyze_overflow_with_prioritization(blocks, topics),
        "warnings": engine.generate_warnings(blocks),
    }
    if args.detailed:
        report["detailed"] = engine.detailed_overflow_info(blocks)
    if args.css:
        report["css_variables"] = engine.css_variables()
        report["print_css"] = engine.print_css()

    print(dumps(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
