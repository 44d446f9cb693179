#!/usr/bin/env python3
"""
Coral Island Wiki Scraper

Scrapes the Coral Island Fandom wiki into a SQLite catalog, one category at
a time. Full mode reads every item page; fast mode uses only wiki category
membership.
"""

import argparse
import logging
import sys
import time
from typing import Any, Callable, Dict, List, Optional

from catalog_db import DEFAULT_DB_PATH, CatalogDatabase
from category_scrapers import CategoryScrapers, ProgressReporter
from wiki_client import DEFAULT_DELAY, DEFAULT_RETRY_DELAY, DEFAULT_TIMEOUT, WikiClient

logger = logging.getLogger(__name__)

CATEGORIES = list(CategoryScrapers.SCRAPERS)


def quality_counts(items: List[Dict[str, Any]]) -> Dict[str, int]:
    return {
        'with_image': sum(1 for item in items if item.get('image_url')),
        'with_price': sum(1 for item in items if item.get('base_price') is not None),
        'with_seasons': sum(1 for item in items if item.get('seasons')),
    }


def run_category(scraper: Callable[[], List[Dict[str, Any]]], database: CatalogDatabase,
                 category_slug: str, clear: bool = False, export_dir: Optional[str] = None) -> int:
    """
    Scrape one category and write it to the database

    Returns:
        Number of items written
    """
    print(f"\n[{category_slug.upper()}]")

    if clear:
        database.clear_category(category_slug)

    items = scraper()
    written = database.insert_items(category_slug, items)
    counts = quality_counts(items)

    print(f"   ✅ Wrote {written}/{len(items)} items")
    print(f"   🖼️  With image: {counts['with_image']}  💰 With price: {counts['with_price']}  "
          f"🌱 With seasons: {counts['with_seasons']}")

    if export_dir:
        database.export_category_to_json(category_slug, export_dir)

    return written


def print_summary(database: CatalogDatabase):
    print(f"\n📊 Database summary")
    print("=" * 50)
    total = 0
    for row in database.category_counts():
        print(f"{row['name']:18} → {row['count']:4d} items")
        total += row['count']
    print(f"{'TOTAL':18} → {total:4d} items")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Coral Island Wiki Scraper')
    parser.add_argument('categories', nargs='*', metavar='category',
                        help=f"Categories to scrape (default: all). Choices: {', '.join(CATEGORIES)}")
    parser.add_argument('--clear', action='store_true',
                        help='Delete existing items of each category before writing')
    parser.add_argument('--fast', action='store_true',
                        help='Use category membership only, skip individual pages')
    parser.add_argument('--database', default=DEFAULT_DB_PATH,
                        help=f'SQLite database path (default: {DEFAULT_DB_PATH})')
    parser.add_argument('--delay', type=float, default=DEFAULT_DELAY,
                        help=f'Delay before each request in seconds (default: {DEFAULT_DELAY})')
    parser.add_argument('--retry-delay', type=float, default=DEFAULT_RETRY_DELAY,
                        help=f'Cooldown before retrying a failed page (default: {DEFAULT_RETRY_DELAY})')
    parser.add_argument('--timeout', type=float, default=DEFAULT_TIMEOUT,
                        help=f'HTTP timeout in seconds (default: {DEFAULT_TIMEOUT})')
    parser.add_argument('--export-dir',
                        help='Also export each scraped category to JSON in this directory')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    unknown = [category for category in args.categories if category not in CATEGORIES]
    if unknown:
        parser.error(f"unknown category: {', '.join(unknown)} (choose from {', '.join(CATEGORIES)})")

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    categories = args.categories or CATEGORIES

    print("=" * 60)
    print("🏝️  Coral Island Wiki Scraper")
    print("=" * 60)
    print(f"Categories: {', '.join(categories)}")
    print(f"Mode: {'FAST (categories only)' if args.fast else 'FULL (individual pages)'}")
    print(f"⚙️  Settings: delay={args.delay}s, retry_delay={args.retry_delay}s, timeout={args.timeout}s")
    if args.clear:
        print("🧹 Existing items will be cleared before writing")

    database = CatalogDatabase(args.database)
    database.init_database()

    client = WikiClient(delay=args.delay, retry_delay=args.retry_delay, timeout=args.timeout)
    progress = ProgressReporter(enabled=not args.verbose)
    scrapers = CategoryScrapers(client, fast=args.fast, progress=progress)

    start_time = time.time()
    results: Dict[str, int] = {}

    try:
        for category_slug in categories:
            # Unknown slugs raise KeyError here, outside the per-category handler
            scraper = scrapers.get_scraper(category_slug)
            try:
                results[category_slug] = run_category(
                    scraper, database, category_slug, clear=args.clear, export_dir=args.export_dir
                )
            except Exception:
                logger.exception(f"Error scraping {category_slug}")
                results[category_slug] = 0
    except KeyboardInterrupt:
        progress.cancel()
        print(f"\n⚠️  Interrupted, partial results: {sum(results.values())} items written "
              f"({', '.join(results) or 'no categories finished'})")
        print_summary(database)
        return 130

    elapsed = time.time() - start_time
    print(f"\n✅ Scraping complete! {sum(results.values())} items written in {elapsed:.1f}s")
    print(f"💾 Database: {args.database}")
    print_summary(database)
    return 0


if __name__ == "__main__":
    sys.exit(main())
