#!/usr/bin/env python3
"""
Tests for the infobox parser.

Fixtures are trimmed copies of the portable infobox markup the wiki renders,
covering both the inline table-cell layout and the nested block layout.
"""

import unittest

from infobox_parser import (
    extract_description,
    extract_field,
    extract_image,
    is_marriage_candidate,
    parse_birthday,
    parse_character_type,
    parse_gender,
    parse_infobox,
    parse_price_tables,
    parse_residence,
    parse_season_table,
    parse_seed,
)


def data_block(source, value):
    return (
        f'<div class="pi-item pi-data pi-item-spacing pi-border-color" data-source="{source}">'
        f'<h3 class="pi-data-label pi-secondary-font">{source.title()}</h3>'
        f'<div class="pi-data-value pi-font">{value}</div></div>'
    )


FISH_HTML = (
    '<aside class="portable-infobox pi-background pi-theme-wikia">'
    '<h2 class="pi-item pi-title" data-source="title">Salmon</h2>'
    '<figure class="pi-item pi-image" data-source="image">'
    '<a href="https://static.wikia.nocookie.net/coralisland/images/a/a1/Salmon.png/revision/latest" '
    'class="image image-thumbnail" title="Salmon"><img src="thumb.png" alt="Salmon"/></a>'
    '<figcaption class="pi-item-spacing pi-caption">A pink&nbsp;fish.</figcaption></figure>'
    + data_block('location', '<a href="/wiki/River" title="River">River</a> • <a href="/wiki/Lake" title="Lake">Lake</a>')
    + data_block('time', 'Morning, Afternoon')
    + data_block('weather', 'Any')
    + data_block('rarity', 'Uncommon')
    + data_block('season', 'Spring')
    + '<table class="pi-horizontal-group"><caption class="pi-header">Season</caption>'
    '<thead><tr><th data-source="spring">Spring</th><th data-source="summer">Summer</th>'
    '<th data-source="fall">Fall</th><th data-source="winter">Winter</th></tr></thead>'
    '<tbody><tr>'
    '<td class="pi-horizontal-group-item pi-data-value" data-source="spring">—</td>'
    '<td class="pi-horizontal-group-item pi-data-value" data-source="summer">✓</td>'
    '<td class="pi-horizontal-group-item pi-data-value" data-source="fall"><img src="check.png"/></td>'
    '<td class="pi-horizontal-group-item pi-data-value" data-source="winter"></td>'
    '</tr></tbody></table>'
    '<table class="pi-horizontal-group"><caption class="pi-header">Fishing</caption>'
    '<tbody><tr><td class="pi-horizontal-group-item" data-source="difficulty">Hard</td>'
    '<td class="pi-horizontal-group-item" data-source="size">Large</td></tr></tbody></table>'
    '<table class="pi-horizontal-group"><caption class="pi-header">Sell price</caption>'
    '<tbody><tr><td data-source="sell">120</td><td data-source="bronze">150</td>'
    '<td data-source="silver">180</td><td data-source="gold">240</td><td data-source="osmium">360</td>'
    '</tr></tbody></table>'
    '<table class="pi-horizontal-group"><caption class="pi-header">Sell price (Fish Price perk)</caption>'
    '<tbody><tr><td data-source="sell">132</td><td data-source="gold">264</td></tr></tbody></table>'
    '</aside>'
)

CROP_HTML = (
    '<aside class="portable-infobox">'
    + data_block('seed', '<a href="/wiki/Turnip_Seeds" title="Turnip Seeds">Turnip Seeds</a> 20G')
    + data_block('growth', '5 days (regrows every 3 days)')
    + data_block('season', 'Spring • Fall')
    + data_block('price', '1,250G')
    + '</aside>'
)

ARTISAN_HTML = (
    '<aside class="portable-infobox">'
    + data_block('machine', '<a href="/wiki/Keg" title="Keg">Keg</a>')
    + data_block('input', 'Any fruit')
    + data_block('time', '3 days')
    + '</aside>'
)


class TestFieldExtraction(unittest.TestCase):
    """Test the generic field extractor and its two layouts."""

    def test_block_layout(self):
        self.assertEqual(extract_field(FISH_HTML, 'rarity'), 'Uncommon')

    def test_table_cell_layout(self):
        self.assertEqual(extract_field(FISH_HTML, 'difficulty'), 'Hard')

    def test_table_cell_layout_wins(self):
        html = '<td data-source="type">Fish</td>' + data_block('type', 'Critter')
        self.assertEqual(extract_field(html, 'type'), 'Fish')

    def test_missing_or_empty_field(self):
        self.assertIsNone(extract_field(FISH_HTML, 'seed'))
        self.assertIsNone(extract_field(data_block('type', ' <span></span> '), 'type'))

    def test_image_and_description(self):
        self.assertEqual(
            extract_image(FISH_HTML),
            "https://static.wikia.nocookie.net/coralisland/images/a/a1/Salmon.png/revision/latest",
        )
        self.assertEqual(extract_description(FISH_HTML), "A pink fish.")

    def test_lazy_loaded_image(self):
        html = ('<aside class="portable-infobox"><img class="lazyload" '
                'data-src="https://static.wikia.nocookie.net/coralisland/images/b/b2/Ruby.png"/></aside>')
        self.assertEqual(extract_image(html), "https://static.wikia.nocookie.net/coralisland/images/b/b2/Ruby.png")


class TestTables(unittest.TestCase):
    """Test the season and price tables."""

    def test_season_table(self):
        self.assertEqual(parse_season_table(FISH_HTML), ['summer', 'fall'])

    def test_no_season_table(self):
        self.assertIsNone(parse_season_table(CROP_HTML))

    def test_price_tables(self):
        prices = parse_price_tables(FISH_HTML)
        self.assertEqual(prices['base_price'], 120)
        self.assertEqual(prices['prices'], {'base': 120, 'bronze': 150, 'silver': 180, 'gold': 240, 'osmium': 360})
        self.assertEqual(prices['prices_with_perk'], {'base': 132, 'gold': 264})

    def test_no_price_tables(self):
        self.assertEqual(parse_price_tables(CROP_HTML), {})


class TestParseInfobox(unittest.TestCase):
    """Test whole-infobox parsing per category."""

    def test_fish(self):
        item = parse_infobox(FISH_HTML)

        self.assertEqual(item['locations'], ['River', 'Lake'])
        self.assertEqual(item['time_of_day'], ['morning', 'afternoon'])
        self.assertEqual(item['weather'], [])
        self.assertEqual(item['rarity'], 'uncommon')
        self.assertEqual(item['base_price'], 120)
        self.assertEqual(item['description'], "A pink fish.")
        self.assertEqual(item['metadata']['difficulty'], 'Hard')
        self.assertEqual(item['metadata']['size'], 'Large')
        self.assertEqual(item['metadata']['prices']['gold'], 240)

    def test_season_table_beats_free_text(self):
        self.assertEqual(parse_infobox(FISH_HTML)['seasons'], ['summer', 'fall'])

    def test_crop(self):
        item = parse_infobox(CROP_HTML)

        self.assertEqual(item['seasons'], ['spring', 'fall'])
        self.assertEqual(item['base_price'], 1250)
        self.assertEqual(item['metadata']['seed'], {'name': 'Turnip Seeds', 'price': 20})
        self.assertEqual(item['metadata']['growth_days'], 5)
        self.assertEqual(item['metadata']['regrowth_days'], 3)

    def test_artisan_duration_is_not_time_of_day(self):
        item = parse_infobox(ARTISAN_HTML)

        self.assertNotIn('time_of_day', item)
        self.assertEqual(item['metadata']['equipment'], 'Keg')
        self.assertEqual(item['metadata']['input'], 'Any fruit')
        self.assertEqual(item['metadata']['processing_days'], 3)
        self.assertEqual(item['metadata']['processing_time'], '3 days')
        self.assertNotIn('processing_hours', item['metadata'])

    def test_absent_fields_are_omitted(self):
        item = parse_infobox('<aside class="portable-infobox"></aside>')
        self.assertEqual(item, {})

    def test_empty_page(self):
        self.assertEqual(parse_infobox(''), {})

    def test_seed_without_price(self):
        self.assertEqual(parse_seed("Mystery Seeds"), {'name': 'Mystery Seeds'})


class TestCharacterFields(unittest.TestCase):
    """Test character page fields."""

    def test_birthday_block_layout(self):
        html = data_block('birthday', '<a href="/wiki/Spring" title="Spring">Spring</a> 15')
        self.assertEqual(parse_birthday(html), {'season': 'spring', 'day': 15})

    def test_birthday_table_cell_layout(self):
        html = '<td class="pi-horizontal-group-item" data-source="birthday">Winter 3</td>'
        self.assertEqual(parse_birthday(html), {'season': 'winter', 'day': 3})

    def test_no_birthday(self):
        self.assertIsNone(parse_birthday(data_block('birthday', 'Unknown')))

    def test_residence(self):
        html = data_block('residency', "Sam's House")
        self.assertEqual(parse_residence(html, []), "Sam's House")

    def test_residence_from_category(self):
        self.assertEqual(parse_residence('', ['Townies', 'Lives at Pelican Town Inn']), 'Pelican Town Inn')
        self.assertIsNone(parse_residence('', ['Townies']))

    def test_gender(self):
        self.assertEqual(parse_gender(['Female characters']), 'female')
        self.assertEqual(parse_gender(['Male characters']), 'male')
        self.assertEqual(parse_gender(['Giants']), 'unknown')

    def test_character_type(self):
        self.assertEqual(parse_character_type(['Townie characters']), 'townie')
        self.assertEqual(parse_character_type(['Merfolk']), 'merperson')
        self.assertEqual(parse_character_type(['Adoptable pets']), 'pet')
        self.assertEqual(parse_character_type(['Female characters']), 'other')

    def test_marriage_candidate(self):
        self.assertTrue(is_marriage_candidate(['Marriage candidates']))
        self.assertFalse(is_marriage_candidate(['Townie characters']))


if __name__ == '__main__':
    unittest.main()
