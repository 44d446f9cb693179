"""
Gift preference extraction from a character's Gifts section

The Gifts section renders as a wikitable with one row per preference level.
The header cell carries a gift icon (or a plain label) and the data cell holds
item links. Items everyone loves or likes sit in collapsible "Universal" blocks
inside the same cell and are left out; only the character's own preferences
are kept.
"""

import re
from typing import Dict, List, Optional

from text_normalizers import strip_markup

GIFT_LEVELS = ["loved", "liked", "disliked", "hated"]

ICON_PATTERN = re.compile(
    r'data-image-(?:key|name)="(Loved|Liked|Disliked|Hated)[_ ]gift\.png"',
    re.IGNORECASE
)
LABEL_PATTERN = re.compile(
    r'>\s*(Loved|Liked|Disliked|Hated)(?:\s+gifts?)?\s*<',
    re.IGNORECASE
)

UNIVERSAL_BLOCK_START = re.compile(
    r'<div[^>]*(?:class="[^"]*ci-collapsible[^"]*"|data-expandtext="Universal[^"]*")[^>]*>',
    re.IGNORECASE
)
DIV_TAG = re.compile(r'<(/?)div\b[^>]*>', re.IGNORECASE)
LINK_TITLE = re.compile(r'<a[^>]*title="([^"]+)"[^>]*>', re.IGNORECASE)


def find_section_index(sections: List[Dict[str, str]], name: str) -> Optional[str]:
    """Index of the section whose heading is exactly `name`, or None"""
    for section in sections:
        if strip_markup(section.get('line', '')) == name:
            return section.get('index')
    return None


def _classify_row(row_html: str) -> Optional[str]:
    icon_match = ICON_PATTERN.search(row_html)
    if icon_match:
        return icon_match.group(1).lower()

    label_match = LABEL_PATTERN.search(row_html)
    if label_match:
        return label_match.group(1).lower()
    return None


def _block_end(html: str, start: int) -> int:
    """Position just past the </div> closing the <div> opened at `start`"""
    depth = 0
    for tag in DIV_TAG.finditer(html, start):
        depth += -1 if tag.group(1) else 1
        if depth == 0:
            return tag.end()
    return len(html)


def remove_universal_blocks(html: str) -> str:
    """
    Remove collapsible "Universal" gift blocks from a cell

    Blocks nest further <div>s, so the closing tag is found by depth
    counting rather than the first </div>.
    """
    while True:
        match = UNIVERSAL_BLOCK_START.search(html)
        if not match:
            return html
        html = html[:match.start()] + html[_block_end(html, match.start()):]


def extract_link_titles(html: str) -> List[str]:
    names = []
    for match in LINK_TITLE.finditer(html):
        title = strip_markup(match.group(1))
        # Namespaced links (File:, Category:) aren't items
        if not title or ':' in title or len(title) >= 50:
            continue
        if title not in names:
            names.append(title)
    return names


def parse_gift_table(html: str) -> Dict[str, List[str]]:
    """
    Parse the gift table of a Gifts section

    Args:
        html: Rendered HTML of the Gifts section

    Returns:
        Dict with loved/liked/disliked/hated lists, each deduplicated
    """
    gifts: Dict[str, List[str]] = {level: [] for level in GIFT_LEVELS}

    for row_match in re.finditer(r'<tr[^>]*>([\s\S]*?)</tr>', html or '', re.IGNORECASE):
        row_html = row_match.group(1)
        level = _classify_row(row_html)
        if not level:
            continue

        cell_match = re.search(r'<td[^>]*>([\s\S]*)</td>', row_html, re.IGNORECASE)
        if not cell_match:
            continue

        items_html = remove_universal_blocks(cell_match.group(1))
        for name in extract_link_titles(items_html):
            if name not in gifts[level]:
                gifts[level].append(name)

    return gifts


def has_gift_preferences(gifts: Optional[Dict[str, List[str]]]) -> bool:
    return bool(gifts) and any(gifts.get(level) for level in GIFT_LEVELS)
