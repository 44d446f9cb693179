"""
Coral Island Text Normalizers

Pure helpers that turn free-text fragments from rendered wiki pages into the
canonical values stored in the catalog (seasons, times, weather, rarity,
prices, locations) and that clean HTML down to plain text.

None of these functions raise: unparseable input yields the "no information"
value for its type (empty list, None, or the default rarity).
"""

import re
from typing import Iterable, List, Optional

SEASONS = ["spring", "summer", "fall", "winter"]
TIMES_OF_DAY = ["morning", "afternoon", "evening", "night"]
WEATHER_TYPES = ["sunny", "windy", "rain", "storm", "snow", "blizzard"]
RARITIES = ["common", "uncommon", "rare", "super_rare", "epic", "legendary"]

# Named entities decoded by strip_markup; other numeric entities are dropped
HTML_ENTITIES = {
    '&nbsp;': ' ',
    '&amp;': '&',
    '&lt;': '<',
    '&gt;': '>',
    '&quot;': '"',
    '&#39;': "'",
}

ENTITY_PATTERN = re.compile('|'.join(re.escape(entity) for entity in HTML_ENTITIES))
BULLET = '•'


def _text(value) -> str:
    return value if isinstance(value, str) else ''


def _ordered(values: Iterable[str], order: List[str]) -> List[str]:
    """Deduplicate values and return them in canonical order"""
    found = set(values)
    return [value for value in order if value in found]


def _strip_once(text: str) -> str:
    text = re.sub(r'<[^>]+>', ' ', text)
    text = ENTITY_PATTERN.sub(lambda match: HTML_ENTITIES[match.group(0)], text)
    text = re.sub(r'&#\d+;', '', text)
    text = text.replace(BULLET, ',')
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def strip_markup(text) -> str:
    """
    Remove HTML tags and entities from a fragment of rendered wiki HTML

    Args:
        text: HTML fragment

    Returns:
        Plain text with collapsed whitespace. Applying it again is a no-op.
    """
    text = _text(text)
    while True:
        cleaned = _strip_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def slugify(name) -> str:
    """Lowercase, hyphenated identifier used with the category as the item key"""
    slug = re.sub(r'[^a-z0-9]+', '-', _text(name).lower())
    return slug.strip('-')


def parse_seasons(text) -> List[str]:
    """
    Parse seasons from text such as "Fall • Winter" or "Spring, Summer"

    Args:
        text: Free-text season value

    Returns:
        Seasons in canonical order; all four for "all/any season" phrases
    """
    lower = _text(text).lower()

    if re.search(r'\b(all|any)\s+seasons?\b|year[\s-]round|all\s+year', lower):
        return list(SEASONS)

    seasons = []
    if 'spring' in lower or re.search(r'\bspr\b', lower):
        seasons.append('spring')
    if 'summer' in lower or re.search(r'\bsum\b', lower):
        seasons.append('summer')
    if 'fall' in lower or 'autumn' in lower or re.search(r'\bfal\b', lower):
        seasons.append('fall')
    if 'winter' in lower or re.search(r'\bwin\b', lower):
        seasons.append('winter')

    return seasons


def parse_time_of_day(text) -> List[str]:
    """Parse active times; "Day" alone means morning through evening"""
    lower = _text(text).lower()

    if 'all day' in lower or 'any time' in lower or 'anytime' in lower:
        return list(TIMES_OF_DAY)

    times = [period for period in TIMES_OF_DAY if period in lower]

    if not times and 'day' in lower and 'night' not in lower:
        return ['morning', 'afternoon', 'evening']

    return times


def parse_weather(text) -> List[str]:
    """
    Parse weather conditions

    "Any" or "All" weather returns an empty list, which the catalog reads as
    "unrestricted", the same as a page with no weather field at all.
    """
    lower = _text(text).lower()

    if re.search(r'\b(any|all)\b', lower):
        return []

    weather = []
    if 'sunny' in lower or 'clear' in lower:
        weather.append('sunny')
    if 'wind' in lower:
        weather.append('windy')
    if 'rain' in lower and 'storm' not in lower:
        weather.append('rain')
    if 'storm' in lower or 'thunder' in lower:
        weather.append('storm')
    if 'snow' in lower:
        weather.append('snow')
    if 'blizzard' in lower:
        weather.append('blizzard')

    return weather


def _rarity_keyword(lower: str) -> Optional[str]:
    if 'legendary' in lower:
        return 'legendary'
    if 'epic' in lower:
        return 'epic'
    if re.search(r'super[\s_-]*rare', lower):
        return 'super_rare'
    if 'rare' in lower:
        return 'rare'
    if 'uncommon' in lower:
        return 'uncommon'
    return None


def parse_rarity(text) -> str:
    """Map rarity text to a rarity key, defaulting to common"""
    return _rarity_keyword(_text(text).lower()) or 'common'


def parse_rarity_from_categories(categories: Iterable[str]) -> Optional[str]:
    """
    Parse rarity from page categories like "Super rare gem" or "Common artifact"

    Returns:
        Rarity key, or None when no category names a rarity
    """
    for category in categories or []:
        lower = _text(category).lower()
        rarity = _rarity_keyword(lower)
        if rarity:
            return rarity
        if 'common' in lower:
            return 'common'
    return None


def parse_price(text) -> Optional[int]:
    """Extract an integer price, preferring a "Base: N" pattern"""
    cleaned = re.sub(r'[,\s]', '', _text(text))

    base_match = re.search(r'[Bb]ase:?(\d+)', cleaned)
    if base_match:
        return int(base_match.group(1))

    number_match = re.match(r'(\d+)', cleaned)
    return int(number_match.group(1)) if number_match else None


def parse_locations(text) -> List[str]:
    """Split a location value on bullets, commas and line breaks"""
    locations = []
    for part in re.split(r'[,•\n\r]+', _text(text)):
        part = part.strip()
        if not part or len(part) >= 100 or part.isdigit():
            continue
        if part not in locations:
            locations.append(part)
    return locations


def parse_duration(text) -> Optional[dict]:
    """
    Parse a processing duration such as "3 days" or "45 min"

    Only the largest unit present is kept, so exactly one of
    processing_days / processing_hours / processing_minutes is set.
    """
    lower = _text(text).lower()

    days_match = re.search(r'(\d+)\s*days?\b', lower)
    if days_match:
        days = int(days_match.group(1))
        return {'processing_time': f"{days} days", 'processing_days': days}

    hours_match = re.search(r'(\d+)\s*(?:hours?|hrs?)\b', lower)
    if hours_match:
        hours = int(hours_match.group(1))
        return {'processing_time': f"{hours} hours", 'processing_hours': hours}

    minutes_match = re.search(r'(\d+)\s*min', lower)
    if minutes_match:
        minutes = int(minutes_match.group(1))
        return {'processing_time': f"{minutes} min", 'processing_minutes': minutes}

    return None


def order_seasons(seasons: Iterable[str]) -> List[str]:
    return _ordered(seasons, SEASONS)


def order_times(times: Iterable[str]) -> List[str]:
    return _ordered(times, TIMES_OF_DAY)
