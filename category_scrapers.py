"""
Coral Island Category Scrapers

One scraping strategy per catalog category. Every strategy starts from wiki
category membership, which is cheap and always available, and in full mode
enriches each member with the details parsed from its own page. Page data
wins when it has a value; membership-derived data fills the gaps, so an item
whose page can't be fetched is still emitted.
"""

import logging
import sys
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

import gift_parser
import infobox_parser
from cooking_parser import parse_cooking_infobox, parse_recipe_table, per_item_prices, recipe_metadata
from lake_temple import build_offerings
from text_normalizers import SEASONS, order_seasons, order_times, parse_rarity_from_categories
from wiki_client import WikiClient

logger = logging.getLogger(__name__)

SKIP_PAGES = {
    'fish': {"Fish", "Fish/beta"},
    'insects': {"Insect", "Bug catching"},
    'critters': {"Critter"},
    'crops': {"Crop", "Fruit plant", "Fruit tree", "Artisan product."},
    'artifacts': {"Artifact"},
    'gems': {"Gem"},
    'forageables': {"Foraging", "Trees", "Scavengeables"},
    'artisan-products': {"Artisan product", "Artisan products", "Artisan_product", "Artisan_products"},
    'characters': {
        "Characters", "Character", "NPC", "NPCs", "Marriage", "Marriage candidates",
        "Gifts", "Gift preferences", "Friendship", "Romance", "Dating", "Children", "Spouse",
    },
}

DEFAULT_LOCATIONS = {
    'critters': ["Ocean", "Diving"],
    'artifacts': ["Digging", "Geodes"],
    'gems': ["Mining", "Geodes"],
    'ocean-forageables': ["Ocean (Diving)"],
}

DAY_TIMES = ['morning', 'afternoon', 'evening']

# Equipment category -> display name
EQUIPMENT_CATEGORIES = {
    "Aging_barrel": "Aging Barrel",
    "Bee_house": "Bee House",
    "Cheese_press": "Cheese Press",
    "Dehydrator": "Dehydrator",
    "Keg": "Keg",
    "Loom": "Loom",
    "Mason_jar": "Mason Jar",
    "Mayonnaise_machine": "Mayonnaise Machine",
    "Mill": "Mill",
    "Oil_press": "Oil Press",
    "Tap": "Tap",
}

# (name keywords, group), first match wins
ITEM_GROUP_KEYWORDS = [
    (("shell", "cowry"), "Shell"),
    (("clam", "quahog", "geoduck"), "Clam"),
    (("oyster",), "Oyster"),
    (("mussel",), "Mussel"),
    (("scallop",), "Scallop"),
    (("urchin",), "Sea Urchin"),
    (("barnacle",), "Clam"),
    (("seaweed", "kelp", "arame", "kombu", "wakame", "lettuce", "grapes"), "Seaweed"),
    (("mushroom", "morel", "shiitake", "matsutake", "trumpet"), "Mushroom"),
    (("coconut",), "Coconut"),
]
FLOWER_KEYWORDS = ("hibiscus", "lotus", "tulip", "daffodil", "violet", "pansy", "larkspur",
                   "cosmo", "jepun", "rafflesia", "titan arum")
LATE_GROUP_KEYWORDS = [
    (("ginger", "ginseng", "wasabi", "bamboo"), "Herb"),
    (("cherry", "fig", "mangosteen", "chestnut", "berry"), "Fruit"),
    (("kale", "celery", "brussels", "eggplant", "canola", "shallot", "watercress"), "Vegetable"),
]


def new_item(name: str, **fields: Any) -> Dict[str, Any]:
    """A record with every availability set empty, meaning unrestricted"""
    item: Dict[str, Any] = {
        'name': name,
        'seasons': [],
        'time_of_day': [],
        'weather': [],
        'locations': [],
        'metadata': {},
    }
    item.update(fields)
    return item


def merge_details(item: Dict[str, Any], details: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Merge parsed page details over a membership-derived record

    Scalar fields and locations only replace the record's values when the
    page had them; metadata keys from the page win over existing keys.
    """
    if not details:
        return item

    for field in ('rarity', 'base_price', 'image_url', 'description'):
        if details.get(field) is not None:
            item[field] = details[field]

    if details.get('locations'):
        item['locations'] = details['locations']

    item['metadata'] = {**item.get('metadata', {}), **details.get('metadata', {})}
    return item


def infer_item_group(name: str, details: Optional[Dict[str, Any]]) -> str:
    """Guess a forageable's group (Shell, Mushroom, Flower, ...) from its name and type"""
    name_lower = name.lower()
    type_lower = str(((details or {}).get('metadata') or {}).get('type') or '').lower()

    for keywords, group in ITEM_GROUP_KEYWORDS:
        if any(keyword in name_lower for keyword in keywords):
            return group
    if 'flower' in type_lower or any(keyword in name_lower for keyword in FLOWER_KEYWORDS):
        return "Flower"
    for keywords, group in LATE_GROUP_KEYWORDS:
        if any(keyword in name_lower for keyword in keywords):
            return group

    for keyword, group in (("herb", "Herb"), ("vegetable", "Vegetable"), ("fruit", "Fruit")):
        if keyword in type_lower:
            return group
    return "Other"


class ItemAccumulator:
    """
    Name-keyed records merged across several category scans

    Used by categories whose availability is spread across one category per
    season, so an item seen in two season categories ends up with both.
    """

    def __init__(self):
        self._items: Dict[str, Dict[str, Any]] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._items

    def __len__(self) -> int:
        return len(self._items)

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        return self._items.get(name)

    def add(self, name: str, seasons: Iterable[str] = (), **fields: Any) -> Dict[str, Any]:
        """Add a record, or add seasons to the existing one"""
        item = self._items.get(name)
        if item is None:
            item = new_item(name, **fields)
            self._items[name] = item
        item['seasons'] = order_seasons(list(item['seasons']) + list(seasons))
        return item

    def flag(self, name: str, key: str, value: Any = True):
        self._items[name]['metadata'][key] = value

    def names(self) -> List[str]:
        return list(self._items)

    def items(self) -> List[Dict[str, Any]]:
        return list(self._items.values())


class ProgressReporter:
    """Single-line console progress bar for per-page iteration"""

    def __init__(self, stream=None, enabled: bool = True, width: int = 20):
        self.stream = stream or sys.stdout
        self.enabled = enabled
        self.width = width
        self.cancelled = False

    def update(self, current: int, total: int, name: str):
        if not self.enabled or total <= 0:
            return
        pct = round(current / total * 100)
        filled = pct * self.width // 100
        bar = '█' * filled + '░' * (self.width - filled)
        self.stream.write(f"\r  [{bar}] {current}/{total} ({pct}%) - {name[:30]:<30}")
        self.stream.flush()

    def clear(self):
        if not self.enabled:
            return
        self.stream.write('\r' + ' ' * 80 + '\r')
        self.stream.flush()

    def cancel(self):
        """Stop iteration before the next item"""
        self.cancelled = True


class CategoryScrapers:
    """Scraping strategies for each catalog category"""

    SCRAPERS = {
        'fish': 'scrape_fish',
        'insects': 'scrape_insects',
        'critters': 'scrape_critters',
        'crops': 'scrape_crops',
        'artifacts': 'scrape_artifacts',
        'gems': 'scrape_gems',
        'forageables': 'scrape_forageables',
        'artisan-products': 'scrape_artisan_products',
        'characters': 'scrape_characters',
        'cooking': 'scrape_cooking',
        'lake-temple': 'scrape_lake_temple',
    }

    def __init__(self, client: WikiClient, fast: bool = False,
                 progress: Optional[ProgressReporter] = None):
        self.client = client
        self.fast = fast
        self.progress = progress or ProgressReporter()

    def get_scraper(self, category_slug: str) -> Callable[[], List[Dict[str, Any]]]:
        """Return the strategy for a category; unknown slugs raise KeyError"""
        return getattr(self, self.SCRAPERS[category_slug])

    def scrape(self, category_slug: str) -> List[Dict[str, Any]]:
        return self.get_scraper(category_slug)()

    def _each(self, names: List[str]) -> Iterator[str]:
        """Yield names while reporting progress, stopping early if cancelled"""
        total = len(names)
        try:
            for index, name in enumerate(names, 1):
                if self.progress.cancelled:
                    logger.info(f"Cancelled after {index - 1}/{total} items")
                    break
                self.progress.update(index, total, name)
                logger.debug(f"Processing {name}")
                yield name
        finally:
            self.progress.clear()

    def _members(self, category: str, skip_key: Optional[str] = None) -> List[str]:
        members = sorted(self.client.members(category, SKIP_PAGES.get(skip_key, ())))
        logger.info(f"Found {len(members)} pages in {category}")
        return members

    def _scrape_simple(self, category: str, skip_key: str,
                       default_locations: Optional[List[str]] = None,
                       keep_availability: bool = True) -> List[Dict[str, Any]]:
        """Membership list, enriched page by page in full mode"""
        names = self._members(category, skip_key)
        default_locations = default_locations or []

        if self.fast:
            return [new_item(name, locations=list(default_locations)) for name in names]

        items = []
        for name in self._each(names):
            details = self.client.fetch_item_details(name) or {}
            item = new_item(name, locations=list(default_locations))
            if keep_availability:
                for field in ('seasons', 'time_of_day', 'weather'):
                    item[field] = details.get(field) or []
            items.append(merge_details(item, details))
        return items

    def scrape_fish(self) -> List[Dict[str, Any]]:
        return self._scrape_simple("Fish", 'fish')

    def scrape_critters(self) -> List[Dict[str, Any]]:
        return self._scrape_simple("Critters", 'critters', DEFAULT_LOCATIONS['critters'])

    def scrape_artifacts(self) -> List[Dict[str, Any]]:
        return self._scrape_simple("Artifacts", 'artifacts', DEFAULT_LOCATIONS['artifacts'],
                                   keep_availability=False)

    def scrape_insects(self) -> List[Dict[str, Any]]:
        """
        Insects, cross-referenced with the seasonal and day/night categories

        Category seasons and times are a fallback used only when the page
        gives none.
        """
        names = self._members("Insects", 'insects')

        season_members = {season: self.client.members(f"{season.capitalize()} insects") for season in SEASONS}
        day_members = self.client.members("Day insects")
        night_members = self.client.members("Night insects")

        def category_availability(name):
            seasons = [season for season in SEASONS if name in season_members[season]]
            times = []
            if name in day_members:
                times.extend(DAY_TIMES)
            if name in night_members:
                times.append('night')
            return seasons, order_times(times)

        if self.fast:
            items = []
            for name in names:
                seasons, times = category_availability(name)
                items.append(new_item(name, seasons=seasons, time_of_day=times))
            return items

        items = []
        for name in self._each(names):
            seasons, times = category_availability(name)
            details = self.client.fetch_item_details(name) or {}
            item = new_item(
                name,
                seasons=details.get('seasons') or seasons,
                time_of_day=details.get('time_of_day') or times,
                weather=details.get('weather') or [],
            )
            items.append(merge_details(item, details))
        return items

    def scrape_crops(self) -> List[Dict[str, Any]]:
        """Crops accumulated across the per-season, any-season and ocean categories"""
        crops = ItemAccumulator()
        skip = SKIP_PAGES['crops']

        for season in SEASONS:
            for name in sorted(self.client.members(f"{season.capitalize()} crops", skip)):
                crops.add(name, [season])

        for name in sorted(self.client.members("Any season crops", skip)):
            crops.add(name, SEASONS)

        for name in sorted(self.client.members("Ocean crops", skip)):
            crops.add(name, SEASONS)
            crops.flag(name, 'ocean')

        logger.info(f"Found {len(crops)} crops")

        if not self.fast:
            for name in self._each(crops.names()):
                merge_details(crops.get(name), self.client.fetch_item_details(name))

        return crops.items()

    def scrape_gems(self) -> List[Dict[str, Any]]:
        """Gems; the rarity in page categories ("Super rare gem") beats the infobox"""
        names = self._members("Gems", 'gems')
        default_locations = DEFAULT_LOCATIONS['gems']

        if self.fast:
            return [new_item(name, locations=list(default_locations)) for name in names]

        items = []
        for name in self._each(names):
            details = self.client.fetch_item_details(name)
            item = merge_details(new_item(name, locations=list(default_locations)), details)

            category_rarity = parse_rarity_from_categories(self.client.fetch_page_categories(name))
            if category_rarity:
                item['rarity'] = category_rarity
            items.append(item)
        return items

    def scrape_forageables(self) -> List[Dict[str, Any]]:
        """
        Land forageables and ocean scavengeables

        Ocean items get a default diving location and an is_ocean flag; a
        location on the item's own page replaces the default.
        """
        skip = SKIP_PAGES['forageables']
        ocean = self.client.members("Ocean scavengeables", skip)
        forageables = ItemAccumulator()

        def add(name, seasons):
            if name in ocean:
                forageables.add(name, seasons, locations=list(DEFAULT_LOCATIONS['ocean-forageables']),
                                metadata={'is_ocean': True})
            else:
                forageables.add(name, seasons)

        for season in SEASONS:
            for name in sorted(self.client.members(f"{season.capitalize()} scavengeables", skip)):
                add(name, [season])

        for name in sorted(self.client.members("Any season scavengeables", skip)):
            add(name, SEASONS)

        # Anything the seasonal categories missed
        for name in sorted(self.client.members("Scavengeables", skip)):
            if name not in forageables:
                add(name, SEASONS if name in ocean else [])

        logger.info(f"Found {len(forageables)} forageables")

        if not self.fast:
            for name in self._each(forageables.names()):
                details = self.client.fetch_item_details(name)
                item = merge_details(forageables.get(name), details)
                if details and not item['metadata'].get('item_group'):
                    item['metadata']['item_group'] = infer_item_group(name, details)

        return forageables.items()

    def scrape_artisan_products(self) -> List[Dict[str, Any]]:
        """Artisan products, with equipment taken from the equipment categories"""
        skip = SKIP_PAGES['artisan-products']

        equipment_lookup: Dict[str, str] = {}
        for category, equipment in EQUIPMENT_CATEGORIES.items():
            for name in self.client.members(category, skip):
                equipment_lookup[name] = equipment
        logger.info(f"Found {len(equipment_lookup)} items with equipment mapping")

        items = []
        names = self._members("Artisan products", 'artisan-products')
        for name in names:
            metadata = {'equipment': equipment_lookup[name]} if name in equipment_lookup else {}
            items.append(new_item(name, metadata=metadata))

        if self.fast:
            return items

        by_name = {item['name']: item for item in items}
        for name in self._each(names):
            item = merge_details(by_name[name], self.client.fetch_item_details(name))
            # The category mapping is authoritative over the page's machine field
            if name in equipment_lookup:
                item['metadata']['equipment'] = equipment_lookup[name]
        return items

    def _gift_preferences(self, title: str) -> Optional[Dict[str, List[str]]]:
        section_index = gift_parser.find_section_index(self.client.fetch_sections(title), "Gifts")
        if section_index is None:
            return None

        html = self.client.fetch_section_html(title, section_index)
        if not html:
            return None

        gifts = gift_parser.parse_gift_table(html)
        return gifts if gift_parser.has_gift_preferences(gifts) else None

    def scrape_characters(self) -> List[Dict[str, Any]]:
        """
        Characters with relationship data

        Full mode reads each character's page for birthday, residence,
        gender and gift preferences. The birthday season doubles as the
        record's season and the residence as its location.
        """
        names = self._members("Characters", 'characters')
        marriage_candidates = self.client.members("Marriage candidates")
        type_overrides = [
            (self.client.members("Townie characters"), 'townie'),
            (self.client.members("Merfolk"), 'merperson'),
            (self.client.members("Child characters"), 'child'),
        ]

        def override_type(name):
            for members, character_type in type_overrides:
                if name in members:
                    return character_type
            return None

        if self.fast:
            return [
                new_item(name, metadata={
                    'is_marriage_candidate': name in marriage_candidates,
                    'character_type': override_type(name) or 'other',
                })
                for name in names
            ]

        items = []
        for name in self._each(names):
            html = self.client.fetch_with_retry(name)
            categories = self.client.fetch_page_categories(name)

            metadata: Dict[str, Any] = {
                'is_marriage_candidate': name in marriage_candidates or infobox_parser.is_marriage_candidate(categories),
                'character_type': override_type(name) or infobox_parser.parse_character_type(categories),
                'gender': infobox_parser.parse_gender(categories),
                'wiki_url': self.client.page_url(name),
            }
            item = new_item(name, metadata=metadata)

            residence = infobox_parser.parse_residence(html or '', categories)
            if residence:
                metadata['residence'] = residence
                item['locations'] = [residence]

            if html:
                birthday = infobox_parser.parse_birthday(html)
                if birthday:
                    metadata['birthday_season'] = birthday['season']
                    metadata['birthday_day'] = birthday['day']
                    item['seasons'] = [birthday['season']]

                image_url = infobox_parser.extract_image(html)
                if image_url:
                    item['image_url'] = image_url
                description = infobox_parser.extract_description(html)
                if description:
                    item['description'] = description

            gifts = self._gift_preferences(name)
            if gifts:
                metadata['gift_preferences'] = gifts

            items.append(item)
        return items

    def scrape_cooking(self) -> List[Dict[str, Any]]:
        """
        Cooked dishes from the recipe table on the Cooking page

        Falls back to bare names from the "Cooked dishes" category when the
        table can't be found.
        """
        html = self.client.fetch_with_retry("Cooking")
        recipes = parse_recipe_table(html) if html else None

        if recipes is None:
            logger.warning("Could not find recipe table on Cooking page, falling back to Cooked dishes")
            return [new_item(name) for name in self._members("Cooked dishes")]

        logger.info(f"Found {len(recipes)} recipes in table")
        items = [new_item(recipe['name'], metadata=recipe_metadata(recipe)) for recipe in recipes]

        if self.fast:
            return items

        by_name = {item['name']: (item, recipe) for item, recipe in zip(items, recipes)}
        for name in self._each([recipe['name'] for recipe in recipes]):
            item, recipe = by_name[name]
            page_html = self.client.fetch_with_retry(name)
            if not page_html:
                continue

            details = infobox_parser.parse_infobox(page_html)
            cooking = parse_cooking_infobox(page_html)
            metadata = item['metadata']
            quantity = recipe['output_quantity']

            if cooking['energy_restored'] is not None:
                metadata['energy_restored'] = cooking['energy_restored']
            if cooking['health_restored'] is not None:
                metadata['health_restored'] = cooking['health_restored']
            if cooking['item_type']:
                metadata['item_type'] = cooking['item_type']
            if cooking['buffs']:
                metadata['buffs'] = cooking['buffs']

            prices = (details.get('metadata') or {}).get('prices')
            if prices:
                metadata['prices'] = per_item_prices(prices, quantity)
            if details.get('base_price'):
                item['base_price'] = details['base_price'] // max(quantity, 1)

            for field in ('image_url', 'description'):
                if details.get(field):
                    item[field] = details[field]

        return items

    def scrape_lake_temple(self) -> List[Dict[str, Any]]:
        offerings = build_offerings()
        logger.info(f"Found {len(offerings)} offerings across 4 altars")
        return offerings
