"""
Cooking recipe parsing

Recipes come from the sortable table on the wiki's "Cooking" page
(Product, Ingredients, Crafting medium, Restores, Recipe source). Individual
dish pages add restoration, type and buff details through their infobox.
"""

import re
from typing import Any, Dict, List, Optional

from infobox_parser import extract_field
from text_normalizers import strip_markup

RECIPE_TABLE_PATTERN = re.compile(
    r'<table[^>]*class="[^"]*fandom-table[^"]*article-table[^"]*sortable[^"]*"[^>]*>[\s\S]*?</table>',
    re.IGNORECASE
)

BUFF_TYPES = [
    "Farming", "Fishing", "Mining", "Foraging", "Combat",
    "Speed", "Luck", "Defense", "Max Energy", "Attack",
    "Max Stamina", "Max Health",
]
DEFAULT_BUFF_DURATION = "7 min"

SKILLS = "Catching|Fishing|Farming|Mining|Foraging|Combat|Ranching|Diving"
DURATION_QUALITIES = {
    'base': 'duration',
    'bronze': 'bronzeduration',
    'silver': 'silverduration',
    'gold': 'goldduration',
    'osmium': 'osmiumduration',
}

LINK_TITLE = re.compile(r'<a[^>]*title="([^"]+)"[^>]*>', re.IGNORECASE)


def parse_ingredients(html: str) -> List[Dict[str, Any]]:
    """
    Parse an ingredients cell into [{"name": ..., "quantity": ...}]

    Linked icons are read first ("Egg × 2"); plain text split on bullets or
    commas is the fallback.
    """
    ingredients: List[Dict[str, Any]] = []
    seen = set()

    icon_pattern = r'<a[^>]*title="([^"]+)"[^>]*>[\s\S]*?</a>(?:[^<×]*(?:<[^a][^>]*>[^<×]*)*?[×x]\s*(\d+))?'
    for match in re.finditer(icon_pattern, html or '', re.IGNORECASE):
        name = strip_markup(match.group(1))
        if not name or ':' in name or len(name) >= 100 or name in seen:
            continue
        seen.add(name)
        ingredients.append({'name': name, 'quantity': int(match.group(2)) if match.group(2) else 1})

    if ingredients:
        return ingredients

    for part in re.split(r'[,•\n]+', strip_markup(html)):
        part = part.strip()
        if len(part) <= 1 or len(part) >= 50:
            continue
        trailing = re.match(r'^(.+?)\s*[×x]\s*(\d+)$', part, re.IGNORECASE)
        leading = re.match(r'^(\d+)\s*[×x]\s*(.+)$', part, re.IGNORECASE)
        if trailing:
            ingredients.append({'name': trailing.group(1).strip(), 'quantity': int(trailing.group(2))})
        elif leading:
            ingredients.append({'name': leading.group(2).strip(), 'quantity': int(leading.group(1))})
        else:
            ingredients.append({'name': part, 'quantity': 1})

    return ingredients


def parse_restoration(text: str) -> Dict[str, Optional[int]]:
    """Parse "125 Energy 56 Health"; a lone number is read as energy"""
    cleaned = strip_markup(text).lower()
    result: Dict[str, Optional[int]] = {'energy': None, 'health': None}

    energy_match = (re.search(r'(\d+)\s*(?:energy|stamina)', cleaned)
                    or re.search(r'(?:energy|stamina)[:\s]*(\d+)', cleaned))
    if energy_match:
        result['energy'] = int(energy_match.group(1))

    health_match = (re.search(r'(\d+)\s*(?:health|hp)', cleaned)
                    or re.search(r'(?:health|hp)[:\s]*(\d+)', cleaned))
    if health_match:
        result['health'] = int(health_match.group(1))

    if result['energy'] is None and result['health'] is None:
        number_match = re.search(r'(\d+)', cleaned)
        if number_match:
            result['energy'] = int(number_match.group(1))

    return result


def categorize_recipe_source(source: str) -> str:
    """Bucket a recipe source into Friendship, General Store, Quest, Starting or Other"""
    lower = source.lower()
    stripped = source.strip()

    if 'heart' in lower or '♥' in source or re.match(r'^[a-z]+\s+\d+$', stripped, re.IGNORECASE):
        return 'Friendship'
    if any(word in lower for word in ('store', 'shop', 'purchase', 'buy')) or re.search(r'\d+\s*g\b', lower):
        return 'General Store'
    if any(word in lower for word in ('quest', 'reward', 'complete', 'mission')):
        return 'Quest'
    if any(word in lower for word in ('start', 'default', 'known', 'initial')) or lower in ('-', 'n/a'):
        return 'Starting'
    return 'Other'


def parse_recipe_source(html: str) -> Dict[str, Any]:
    """
    Turn a recipe source cell into display text

    Returns:
        Dict with "display" ("Emily 4 ♥", "Catching level 2",
        "Manual cooking", ...), "source_type" and, for friendship
        recipes, "character" and "hearts"
    """
    text = strip_markup(html)
    source: Dict[str, Any] = {}

    character = None
    character_match = re.search(r'<a[^>]*title="([^"/]+)"[^>]*>', html or '', re.IGNORECASE)
    if character_match:
        character = character_match.group(1).strip()
        lower = character.lower()
        if 'letter' in lower or 'friendship' in lower or 'heart' in lower or lower == 'mail':
            character = None

    hearts = None
    hearts_match = re.search(r'(\d+)\s*(?:♥|hearts?)', text, re.IGNORECASE)
    if not hearts_match and character:
        hearts_match = re.search(rf'{re.escape(character)}\s*(\d+)', text, re.IGNORECASE)
    if hearts_match:
        hearts = int(hearts_match.group(1))

    skill_match = re.search(rf'({SKILLS})\s*(?:level|mastery)?\s*(\d+)', text, re.IGNORECASE)

    if character and hearts:
        display = f"{character} {hearts} ♥"
    elif skill_match:
        display = f"{skill_match.group(1)} level {skill_match.group(2)}"
    else:
        display = re.sub(r'/Letters.*$', '', text, flags=re.IGNORECASE)
        display = re.sub(r'\([^)]*hearts?\)', '', display, flags=re.IGNORECASE)
        display = re.sub(r'\s+', ' ', display.replace('♥', '')).strip()

    if len(display) < 2 or display in ('-', 'N/A'):
        display = 'Manual cooking'

    source['display'] = display
    source['source_type'] = categorize_recipe_source(f"{html} {text}")
    if character:
        source['character'] = character
    if hearts:
        source['hearts'] = hearts
    return source


def parse_buffs(text: str) -> List[Dict[str, Any]]:
    """Parse buffs written as "+2 Farming (7 min)" or "Farming +2 for 7 min" """
    buffs = []
    duration = r'(\d+\s*(?:min|hour|sec|m|h|s))'

    for buff_type in BUFF_TYPES:
        name = re.escape(buff_type)
        match = (re.search(rf'\+?(\d+)\s*{name}[^\d]*{duration}', text, re.IGNORECASE)
                 or re.search(rf'{name}\s*\+?(\d+)[^\d]*{duration}', text, re.IGNORECASE))
        if match:
            buffs.append({
                'type': buff_type,
                'value': int(match.group(1)),
                'duration': re.sub(r'\s+', ' ', match.group(2)).strip(),
            })
            continue

        bare_match = re.search(rf'\+(\d+)\s*{name}(?!\d)', text, re.IGNORECASE)
        if bare_match:
            buffs.append({'type': buff_type, 'value': int(bare_match.group(1)), 'duration': DEFAULT_BUFF_DURATION})

    return buffs


def _first_field(html: str, *sources: str) -> Optional[str]:
    for source in sources:
        value = extract_field(html, source)
        if value:
            return value
    return None


def parse_cooking_infobox(html: str) -> Dict[str, Any]:
    """
    Parse a dish page infobox

    Returns:
        Dict with energy_restored, health_restored, item_type (each None when
        absent) and a buffs list
    """
    result: Dict[str, Any] = {
        'buffs': [],
        'energy_restored': None,
        'health_restored': None,
        'item_type': None,
    }

    restores = _first_field(html, 'energy', 'stamina', 'restore', 'restores')
    if restores:
        restoration = parse_restoration(restores)
        result['energy_restored'] = restoration['energy']
        result['health_restored'] = restoration['health']

    if result['health_restored'] is None:
        health = _first_field(html, 'health', 'hp')
        number_match = re.search(r'(\d+)', health) if health else None
        if number_match:
            result['health_restored'] = int(number_match.group(1))

    result['item_type'] = extract_field(html, 'type')

    buff_type = _first_field(html, 'buff', 'buff type')
    if buff_type and buff_type != '-' and buff_type.lower() != 'none':
        buff: Dict[str, Any] = {
            'type': buff_type,
            'bonus': _first_field(html, 'buff bonus', 'bonus') or '+?',
        }
        durations = {}
        for quality, source in DURATION_QUALITIES.items():
            value = extract_field(html, source)
            if value and value != '-':
                durations[quality] = value
        if durations:
            buff['durations'] = durations
        result['buffs'].append(buff)

    if not result['buffs']:
        buff_text = _first_field(html, 'buffs', 'effect')
        if buff_text:
            result['buffs'] = [
                {'type': buff['type'], 'bonus': f"+{buff['value']}", 'durations': {'base': buff['duration']}}
                for buff in parse_buffs(buff_text)
            ]

    return result


def parse_recipe_table(html: str) -> Optional[List[Dict[str, Any]]]:
    """
    Parse the recipe table of the Cooking page

    Args:
        html: Rendered HTML of the Cooking page

    Returns:
        One dict per recipe (name, output_quantity, ingredients, utensil,
        energy, health, source), or None when the page has no recipe table
    """
    table_match = RECIPE_TABLE_PATTERN.search(html or '')
    if not table_match:
        return None

    recipes = []
    seen = set()

    for row_match in re.finditer(r'<tr[^>]*>([\s\S]*?)</tr>', table_match.group(0), re.IGNORECASE):
        cells = re.findall(r'<td[^>]*>([\s\S]*?)</td>', row_match.group(1), re.IGNORECASE)
        # Header row has <th> cells only
        if len(cells) < 5:
            continue

        product, ingredients_cell, utensil_cell, restores_cell, source_cell = cells[:5]

        name_match = LINK_TITLE.search(product)
        if not name_match:
            continue
        name = strip_markup(name_match.group(1))
        if name in seen:
            continue
        seen.add(name)

        quantity_match = re.search(r'[×x]\s*(\d+)', strip_markup(product), re.IGNORECASE)
        utensil_match = LINK_TITLE.search(utensil_cell)
        restoration = parse_restoration(restores_cell)

        recipes.append({
            'name': name,
            'output_quantity': int(quantity_match.group(1)) if quantity_match else 1,
            'ingredients': parse_ingredients(ingredients_cell),
            'utensil': strip_markup(utensil_match.group(1)) if utensil_match else strip_markup(utensil_cell),
            'energy': restoration['energy'],
            'health': restoration['health'],
            'source': parse_recipe_source(source_cell),
        })

    return recipes


def recipe_metadata(recipe: Dict[str, Any]) -> Dict[str, Any]:
    """Metadata carried by every cooking record, from the recipe table alone"""
    source = recipe['source']
    metadata: Dict[str, Any] = {
        'ingredients': recipe['ingredients'],
        'utensil': recipe['utensil'],
        'recipe_source': source['display'],
        'recipe_source_category': source['source_type'],
    }
    if source.get('character'):
        metadata['recipe_source_character'] = source['character']
    if source.get('hearts'):
        metadata['recipe_source_hearts'] = source['hearts']
    if recipe['energy'] is not None:
        metadata['energy_restored'] = recipe['energy']
    if recipe['health'] is not None:
        metadata['health_restored'] = recipe['health']
    if recipe['output_quantity'] > 1:
        metadata['output_quantity'] = recipe['output_quantity']
    return metadata


def per_item_prices(prices: Dict[str, int], output_quantity: int) -> Dict[str, int]:
    """Prices on dish pages are per batch; divide them down when a recipe yields several"""
    if output_quantity <= 1:
        return dict(prices)
    return {quality: price // output_quantity for quality, price in prices.items()}
