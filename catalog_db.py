"""
Coral Island Catalog Database

SQLite storage for scraped items. Items are keyed by (category, slug) and
written with an upsert that keeps previously stored values for fields the
new scrape couldn't find (rarity, base price, image, description) while
letting fresh availability data and metadata replace the old.
"""

import json
import logging
import os
import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from text_normalizers import slugify

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "coral_island.db"

# (name, slug, description, display_order)
DEFAULT_CATEGORIES = [
    ('Fish', 'fish', 'All catchable fish in the ocean, rivers, and lakes', 1),
    ('Insects', 'insects', 'Bugs and insects to catch with a net', 2),
    ('Critters', 'critters', 'Small animals that can be caught', 3),
    ('Crops', 'crops', 'Plantable crops by season', 4),
    ('Artifacts', 'artifacts', 'Museum donation artifacts', 5),
    ('Gems', 'gems', 'Minerals and gems from mining', 6),
    ('Forageables', 'forageables', 'Foraged items from land and ocean including mushrooms, flowers, shells, and more', 7),
    ('Cooking', 'cooking', 'Recipes and cooked dishes', 8),
    ('Characters', 'characters', 'Town residents and relationship tracking', 9),
    ('Artisan Products', 'artisan-products', 'Goods made with artisan equipment', 10),
    ('Lake Temple', 'lake-temple', 'Goddess temple altar offerings and their rewards', 11),
]

ITEM_COLUMNS = [
    'id', 'name', 'slug', 'rarity', 'seasons', 'time_of_day', 'weather',
    'locations', 'base_price', 'image_url', 'description', 'metadata', 'updated_at',
]
JSON_LIST_COLUMNS = ('seasons', 'time_of_day', 'weather', 'locations')

UPSERT_SQL = '''
    INSERT INTO items (
        category_id, name, slug, rarity, seasons, time_of_day,
        weather, locations, base_price, image_url, description, metadata
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(category_id, slug) DO UPDATE SET
        name = excluded.name,
        rarity = COALESCE(excluded.rarity, items.rarity),
        seasons = excluded.seasons,
        time_of_day = excluded.time_of_day,
        weather = excluded.weather,
        locations = excluded.locations,
        base_price = COALESCE(excluded.base_price, items.base_price),
        image_url = COALESCE(excluded.image_url, items.image_url),
        description = COALESCE(excluded.description, items.description),
        metadata = excluded.metadata,
        updated_at = CURRENT_TIMESTAMP
'''


class CatalogDatabase:
    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path

    def init_database(self):
        """Create the categories and items tables and seed the default categories"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS categories (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    slug TEXT NOT NULL UNIQUE,
                    description TEXT,
                    display_order INTEGER DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            # Availability lists and metadata are stored as JSON text
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    category_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    slug TEXT NOT NULL,
                    rarity TEXT,
                    seasons TEXT DEFAULT '[]',
                    time_of_day TEXT DEFAULT '[]',
                    weather TEXT DEFAULT '[]',
                    locations TEXT DEFAULT '[]',
                    base_price INTEGER,
                    image_url TEXT,
                    description TEXT,
                    metadata TEXT DEFAULT '{}',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE(category_id, slug),
                    FOREIGN KEY (category_id) REFERENCES categories (id) ON DELETE CASCADE
                )
            ''')

            cursor.execute('CREATE INDEX IF NOT EXISTS idx_items_category ON items(category_id)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_items_rarity ON items(rarity)')

            cursor.executemany('''
                INSERT OR IGNORE INTO categories (name, slug, description, display_order)
                VALUES (?, ?, ?, ?)
            ''', DEFAULT_CATEGORIES)

            conn.commit()
        finally:
            conn.close()

        logger.info(f"Database initialized: {self.db_path}")

    def get_category_id(self, slug: str) -> Optional[int]:
        conn = sqlite3.connect(self.db_path)
        try:
            row = conn.execute('SELECT id FROM categories WHERE slug = ?', (slug,)).fetchone()
            return row[0] if row else None
        finally:
            conn.close()

    def clear_category(self, slug: str) -> int:
        """Delete every item in a category, returning the number removed"""
        category_id = self.get_category_id(slug)
        if category_id is None:
            logger.error(f"Category {slug} not found")
            return 0

        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.execute('DELETE FROM items WHERE category_id = ?', (category_id,))
            conn.commit()
            logger.info(f"Cleared {cursor.rowcount} existing {slug} items")
            return cursor.rowcount
        finally:
            conn.close()

    @staticmethod
    def _item_params(category_id: int, item: Dict[str, Any]) -> tuple:
        return (
            category_id,
            item['name'],
            slugify(item['name']),
            item.get('rarity'),
            json.dumps(item.get('seasons') or []),
            json.dumps(item.get('time_of_day') or []),
            json.dumps(item.get('weather') or []),
            json.dumps(item.get('locations') or []),
            item.get('base_price'),
            item.get('image_url'),
            item.get('description'),
            json.dumps(item.get('metadata') or {}, ensure_ascii=False),
        )

    def insert_items(self, category_slug: str, items: Iterable[Dict[str, Any]]) -> int:
        """
        Upsert scraped items into a category

        Each item is committed on its own, so one bad item never rolls back
        the others.

        Args:
            category_slug: Slug of an existing category
            items: Scraped item dicts

        Returns:
            Number of items written (0 if the category doesn't exist)
        """
        category_id = self.get_category_id(category_slug)
        if category_id is None:
            logger.error(f"Category {category_slug} not found")
            return 0

        written = 0
        conn = sqlite3.connect(self.db_path)

        try:
            for item in items:
                name = item.get('name')
                if not name or not slugify(name):
                    continue

                try:
                    conn.execute(UPSERT_SQL, self._item_params(category_id, item))
                    conn.commit()
                    written += 1
                except (sqlite3.Error, TypeError, ValueError) as e:
                    conn.rollback()
                    logger.error(f"Database error saving item {name}: {e}")
        finally:
            conn.close()

        return written

    @staticmethod
    def _decode_row(row: tuple) -> Dict[str, Any]:
        item = dict(zip(ITEM_COLUMNS, row))
        for column in JSON_LIST_COLUMNS:
            item[column] = json.loads(item[column]) if item[column] else []
        item['metadata'] = json.loads(item['metadata']) if item['metadata'] else {}
        return item

    def get_item(self, category_slug: str, item_slug: str) -> Optional[Dict[str, Any]]:
        conn = sqlite3.connect(self.db_path)
        try:
            row = conn.execute(f'''
                SELECT {", ".join(f"items.{column}" for column in ITEM_COLUMNS)}
                FROM items JOIN categories ON categories.id = items.category_id
                WHERE categories.slug = ? AND items.slug = ?
            ''', (category_slug, item_slug)).fetchone()
        finally:
            conn.close()

        return self._decode_row(row) if row else None

    def get_items(self, category_slug: str) -> List[Dict[str, Any]]:
        conn = sqlite3.connect(self.db_path)
        try:
            rows = conn.execute(f'''
                SELECT {", ".join(f"items.{column}" for column in ITEM_COLUMNS)}
                FROM items JOIN categories ON categories.id = items.category_id
                WHERE categories.slug = ?
                ORDER BY items.name
            ''', (category_slug,)).fetchall()
        finally:
            conn.close()

        return [self._decode_row(row) for row in rows]

    def category_counts(self) -> List[Dict[str, Any]]:
        """Item count per category, in display order"""
        conn = sqlite3.connect(self.db_path)
        try:
            rows = conn.execute('''
                SELECT c.name, c.slug, COUNT(i.id)
                FROM categories c
                LEFT JOIN items i ON i.category_id = c.id
                GROUP BY c.id
                ORDER BY c.display_order
            ''').fetchall()
        finally:
            conn.close()

        return [{'name': name, 'slug': slug, 'count': count} for name, slug, count in rows]

    def export_category_to_json(self, category_slug: str, output_dir: str = "data") -> int:
        """
        Export one category to <output_dir>/<slug>.json

        Returns:
            Number of items exported
        """
        os.makedirs(output_dir, exist_ok=True)
        items = self.get_items(category_slug)

        filename = os.path.join(output_dir, f"{category_slug}.json")
        try:
            with open(filename, 'w', encoding='utf-8') as f:
                json.dump(items, f, indent=2, ensure_ascii=False)
        except IOError as e:
            logger.error(f"Error saving {filename}: {e}")
            return 0

        logger.info(f"Exported {len(items)} items to {filename}")
        return len(items)
