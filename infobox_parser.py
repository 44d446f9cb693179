"""
Coral Island Infobox Parser

Extracts item fields from the rendered HTML of a wiki page's portable
infobox. Each field has its own small extractor that returns None when the
field isn't on the page, so one missing or oddly rendered field never blocks
the others.

The wiki renders data rows in two layouts:
    A. inline table cells:   <td class="pi-horizontal-group-item" data-source="season">...</td>
    B. nested blocks:        <div class="pi-item pi-data" data-source="location">
                                 <h3 class="pi-data-label">...</h3>
                                 <div class="pi-data-value pi-font">...</div>
                             </div>
"""

import re
from typing import Any, Dict, Iterator, List, Optional, Tuple

from text_normalizers import (
    SEASONS,
    parse_duration,
    parse_locations,
    parse_price,
    parse_rarity,
    parse_seasons,
    parse_time_of_day,
    parse_weather,
    strip_markup,
)

ASSET_HOST = "https://static.wikia.nocookie.net"

PRICE_QUALITIES = ["sell", "base", "bronze", "silver", "gold", "osmium"]

CHECKMARKS = ('✓', '✔', '&#10003;', '&#10004;')
DASHES = '—–-'


def extract_field(html: str, source: str) -> Optional[str]:
    """
    Extract the text value of a labeled infobox row

    Tries the inline table-cell layout first, then the nested block layout.

    Args:
        html: Page HTML
        source: Infobox data-source key (e.g. "location", "rarity")

    Returns:
        Stripped text, or None if the row is missing or empty
    """
    source = re.escape(source)
    patterns = [
        rf'<td[^>]*data-source="{source}"[^>]*>([\s\S]*?)</td>',
        rf'data-source="{source}"[^>]*>[\s\S]*?<div[^>]*class="[^"]*pi-data-value[^"]*"[^>]*>([\s\S]*?)</div>',
    ]

    for pattern in patterns:
        match = re.search(pattern, html, re.IGNORECASE)
        if match:
            value = strip_markup(match.group(1))
            if value:
                return value
    return None


def extract_first_field(html: str, *sources: str) -> Optional[str]:
    """Return the first of several alternative fields that is present"""
    for source in sources:
        value = extract_field(html, source)
        if value:
            return value
    return None


def extract_image(html: str) -> Optional[str]:
    figure_match = re.search(
        r'<figure[^>]*class="[^"]*pi-image[^"]*"[^>]*>[\s\S]*?<a[^>]*href="([^"]+)"[\s\S]*?</figure>',
        html, re.IGNORECASE
    )
    if figure_match:
        return figure_match.group(1)

    # Lazy-loaded images keep the real URL in data-src
    lazy_match = re.search(
        rf'portable-infobox[\s\S]*?data-src="({re.escape(ASSET_HOST)}[^"]+)"',
        html, re.IGNORECASE
    )
    if lazy_match:
        return lazy_match.group(1)
    return None


def extract_description(html: str) -> Optional[str]:
    caption_match = re.search(
        r'<figcaption[^>]*class="[^"]*pi-caption[^"]*"[^>]*>([\s\S]*?)</figcaption>',
        html, re.IGNORECASE
    )
    if caption_match:
        return strip_markup(caption_match.group(1)) or None
    return None


def iter_horizontal_tables(html: str) -> Iterator[Tuple[str, str]]:
    """Yield (caption text, table HTML) for each horizontal group table"""
    table_pattern = r'<table[^>]*class="[^"]*pi-horizontal-group[^"]*"[^>]*>[\s\S]*?</table>'
    for table_match in re.finditer(table_pattern, html, re.IGNORECASE):
        table_html = table_match.group(0)
        caption_match = re.search(r'<caption[^>]*>([\s\S]*?)</caption>', table_html, re.IGNORECASE)
        caption = strip_markup(caption_match.group(1)) if caption_match else ''
        yield caption, table_html


def _price_cell(table_html: str, field: str) -> Optional[str]:
    patterns = [
        rf'<td[^>]*data-source="{field}"[^>]*>([\s\S]*?)</td>',
        rf'data-source="{field}"[^>]*>[\s\S]*?<td[^>]*>([\s\S]*?)</td>',
    ]
    for pattern in patterns:
        match = re.search(pattern, table_html, re.IGNORECASE)
        if match:
            return match.group(1)
    return None


def parse_price_tables(html: str) -> Dict[str, Any]:
    """
    Parse the quality-tier price tables of an infobox

    Returns:
        Dict with any of "prices", "prices_with_perk" (quality -> price) and
        "base_price". The first table without a perk caption is authoritative
        for base_price.
    """
    result: Dict[str, Any] = {}

    for caption, table_html in iter_horizontal_tables(html):
        caption = caption.lower()
        if 'sell price' not in caption and 'prices' not in caption:
            continue

        prices: Dict[str, int] = {}
        for field in PRICE_QUALITIES:
            cell = _price_cell(table_html, field)
            if cell is None:
                continue
            value = parse_price(strip_markup(cell))
            if value:
                # "sell" is the base quality price on some pages
                prices['base' if field == 'sell' else field] = value

        if not prices:
            continue

        if 'perk' in caption or 'fish price' in caption:
            result.setdefault('prices_with_perk', prices)
        elif 'prices' not in result:
            result['prices'] = prices
            if 'base' in prices:
                result['base_price'] = prices['base']

    return result


def _season_cell_available(content: str) -> bool:
    if any(mark in content for mark in CHECKMARKS) or '<img' in content.lower():
        return True
    text = strip_markup(content).strip(DASHES + ' ')
    return bool(text)


def parse_season_table(html: str) -> Optional[List[str]]:
    """
    Parse the checkbox-style season table used by fish pages

    Returns:
        Seasons marked available, or None when the page has no season table
    """
    for caption, table_html in iter_horizontal_tables(html):
        if caption.lower() != 'season':
            continue

        seasons = []
        for season in SEASONS:
            cell_match = re.search(
                rf'<td[^>]*data-source="{season}"[^>]*>([\s\S]*?)</td>',
                table_html, re.IGNORECASE
            )
            if cell_match and _season_cell_available(cell_match.group(1)):
                seasons.append(season)
        return seasons

    return None


def parse_item_seasons(html: str) -> List[str]:
    """Season table wins outright; the free-text season field is the fallback"""
    seasons = parse_season_table(html)
    if seasons:
        return seasons

    season_text = extract_field(html, 'season')
    return parse_seasons(season_text) if season_text else []


def parse_seed(seed: str) -> Optional[Dict[str, Any]]:
    """Split a "Turnip Seeds 20G" value into seed name and price"""
    seed_info: Dict[str, Any] = {}
    name = re.sub(r'\d+\s*[Gg]?$', '', seed).strip()
    price_match = re.search(r'(\d+)\s*[Gg]?$', seed)
    if price_match:
        seed_info['price'] = int(price_match.group(1))
    if not name:
        return None
    seed_info['name'] = name
    return seed_info


def parse_crop_fields(html: str) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {}

    seed = extract_field(html, 'seed')
    if seed:
        seed_info = parse_seed(seed)
        if seed_info:
            metadata['seed'] = seed_info

    growth = extract_first_field(html, 'growth', 'grow')
    if growth:
        days_match = re.search(r'(\d+)\s*days?', growth, re.IGNORECASE)
        if days_match:
            metadata['growth_days'] = int(days_match.group(1))
        regrowth_match = re.search(r'regrow[^\d]*(\d+)', growth, re.IGNORECASE)
        if regrowth_match:
            metadata['regrowth_days'] = int(regrowth_match.group(1))

    # Some pages carry regrowth as its own row
    regrowth = extract_first_field(html, 'regrowth', 'regrow')
    if regrowth and 'regrowth_days' not in metadata:
        number_match = re.search(r'(\d+)', regrowth)
        if number_match:
            metadata['regrowth_days'] = int(number_match.group(1))

    unlock = extract_first_field(html, 'unlock', 'unlocked')
    if unlock:
        metadata['unlock_requirement'] = unlock

    return metadata


def parse_artisan_fields(html: str, time_text: Optional[str]) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {}

    machine = extract_field(html, 'machine')
    if machine:
        metadata['equipment'] = machine

    ingredient = extract_field(html, 'input')
    if ingredient:
        metadata['input'] = ingredient

    if time_text:
        duration = parse_duration(time_text)
        if duration:
            metadata.update(duration)

    item_group = extract_field(html, 'item_group')
    if item_group:
        metadata['item_group'] = item_group

    return metadata


def parse_infobox(html: str) -> Dict[str, Any]:
    """
    Parse the portable infobox of a page into a partial item

    Args:
        html: Rendered page HTML

    Returns:
        Partial item dict; only fields found on the page are present.
        Category-specific values are collected under "metadata".
    """
    item: Dict[str, Any] = {}
    metadata: Dict[str, Any] = {}
    html = html or ''

    image_url = extract_image(html)
    if image_url:
        item['image_url'] = image_url

    description = extract_description(html)
    if description:
        item['description'] = description

    location = extract_field(html, 'location')
    if location:
        item['locations'] = parse_locations(location)

    weather = extract_field(html, 'weather')
    if weather:
        item['weather'] = parse_weather(weather)

    # Artisan pages reuse "time" for processing duration
    time_text = extract_field(html, 'time')
    if time_text and not parse_duration(time_text):
        item['time_of_day'] = parse_time_of_day(time_text)

    rarity = extract_field(html, 'rarity')
    if rarity:
        item['rarity'] = parse_rarity(rarity)

    item_type = extract_field(html, 'type')
    if item_type:
        metadata['type'] = item_type

    price_data = parse_price_tables(html)
    if price_data.get('base_price'):
        item['base_price'] = price_data['base_price']
    if price_data.get('prices'):
        metadata['prices'] = price_data['prices']
    if price_data.get('prices_with_perk'):
        metadata['prices_with_perk'] = price_data['prices_with_perk']

    if 'base_price' not in item:
        price = extract_first_field(html, 'price', 'sell', 'base')
        if price:
            base_price = parse_price(price)
            if base_price is not None:
                item['base_price'] = base_price

    seasons = parse_item_seasons(html)
    if seasons:
        item['seasons'] = seasons

    # Fish
    for source in ('difficulty', 'size', 'pattern'):
        value = extract_field(html, source)
        if value:
            metadata[source] = value

    metadata.update(parse_crop_fields(html))
    metadata.update(parse_artisan_fields(html, time_text))

    if metadata:
        item['metadata'] = metadata

    return item


# Character pages

def parse_birthday(html: str) -> Optional[Dict[str, Any]]:
    """
    Parse a character birthday such as "Spring 15"

    Returns:
        {"season": "spring", "day": 15} or None
    """
    patterns = [
        r'<td[^>]*data-source="birthday"[^>]*>([\s\S]*?)</td>',
        r'data-source="birthday"[^>]*>[\s\S]*?<div[^>]*class="[^"]*pi-data-value[^"]*"[^>]*>([\s\S]*?)</div>',
        # Inline text with links around the season name
        r'data-source="birthday"[^>]*>([^<]*(?:<a[^>]*>[^<]*</a>[^<]*)*)',
    ]

    for pattern in patterns:
        match = re.search(pattern, html or '', re.IGNORECASE)
        if not match:
            continue
        text = strip_markup(match.group(1)).lower()
        season_match = re.search(r'(spring|summer|fall|winter)\s*(\d+)', text)
        if season_match:
            return {'season': season_match.group(1), 'day': int(season_match.group(2))}

    return None


def parse_residence(html: str, categories: List[str]) -> Optional[str]:
    """Residence from the infobox, falling back to a "Lives at X" category"""
    residence = extract_first_field(html or '', 'residency', 'residence', 'address', 'home')
    if residence and len(residence) < 100:
        return residence

    for category in categories:
        lives_match = re.match(r'lives at (.+)', category.strip(), re.IGNORECASE)
        if lives_match:
            return lives_match.group(1).strip()

    return None


def parse_gender(categories: List[str]) -> str:
    for category in categories:
        lower = category.lower()
        if 'female' in lower:
            return 'female'
        if 'male' in lower:
            return 'male'
    return 'unknown'


def parse_character_type(categories: List[str]) -> str:
    """Character type guessed from page categories, most specific first"""
    for category in categories:
        lower = category.lower()
        if 'townie' in lower:
            return 'townie'
        if 'merfolk' in lower or 'merperson' in lower:
            return 'merperson'
        if 'giant' in lower:
            return 'giant'
        if 'adoptable pet' in lower:
            return 'pet'
        if 'stranger' in lower:
            return 'stranger'
    return 'other'


def is_marriage_candidate(categories: List[str]) -> bool:
    return any('marriage candidate' in category.lower() for category in categories)
