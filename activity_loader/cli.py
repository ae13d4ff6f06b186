"""
Activity Loader CLI

    activity-loader fetch [--config PATH]
    activity-loader render PAGE [--config PATH] [--output PATH] [--expand]
"""

from __future__ import annotations
from datetime import date
from typing import Optional
from pathlib import Path
import argparse
import asyncio
import json
import logging
import sys

from .config import LoaderConfig
from .errors import ConfigError
from .frontend.dom import Document
from .loader import create_loader, create_resolver


logger = logging.getLogger(__name__)


def _record_to_json(record) -> dict:
    value = record.date
    if isinstance(value, date):
        value = value.isoformat()
    return {'date': value, 'title': record.title, 'content': record.content}


async def _fetch(config: LoaderConfig) -> int:
    outcome = await create_resolver(config).resolve()
    if not outcome.success:
        logger.error("[%s] %s", outcome.error_code.code, outcome.diagnostic)
        return 1

    logger.info("Resolved %d records from %s", len(outcome.records), outcome.source_id)
    json.dump(
        [_record_to_json(r) for r in outcome.records],
        sys.stdout, ensure_ascii=False, indent=2,
    )
    sys.stdout.write("\n")
    return 0


async def _render(config: LoaderConfig, page_path: Path, output: Optional[Path], expand: bool) -> int:
    page = Document.from_markup(page_path.read_text(encoding='utf-8'))
    loader = create_loader(page, config)
    report = await loader.initialize()

    if expand and loader.disclosure is not None:
        loader.disclosure.show_more()

    html = page.to_html()
    if output:
        output.write_text(html, encoding='utf-8')
        print(f"[*] Wrote {output} ({report.item_count} activities)")
    else:
        sys.stdout.write(html)

    return 0 if report.success else 1


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Load activities into a page")
    parser.add_argument("--config", type=Path, help="Path to activity_loader.json")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("fetch", help="Resolve activities and print them as JSON")

    render = sub.add_parser("render", help="Render activities into an HTML page")
    render.add_argument("page", type=Path, help="HTML page containing the activity container")
    render.add_argument("-o", "--output", type=Path, help="Write the page here instead of stdout")
    render.add_argument("--expand", action="store_true", help="Render with all activities visible")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = LoaderConfig.load(args.config)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if args.command == "fetch":
        return asyncio.run(_fetch(config))
    return asyncio.run(_render(config, args.page, args.output, args.expand))


if __name__ == "__main__":
    sys.exit(main())
