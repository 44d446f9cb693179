#!/usr/bin/env python3
"""
Tests for gift preference parsing.
"""

import unittest

from gift_parser import (
    extract_link_titles,
    find_section_index,
    has_gift_preferences,
    parse_gift_table,
    remove_universal_blocks,
)

GIFTS_HTML = '''
<h2><span class="mw-headline" id="Gifts">Gifts</span></h2>
<table class="wikitable">
<tr>
  <th><span typeof="mw:File"><img src="loved.png" data-image-name="Loved gift.png" data-image-key="Loved_gift.png"/></span> Loved</th>
  <td>
    <a href="/wiki/Pomfret" title="Pomfret">Pomfret</a>, <a href="/wiki/Ruby" title="Ruby">Ruby</a>
    <div class="ci-collapsible mw-collapsible mw-collapsed" data-expandtext="Universal loves">
      <div class="mw-collapsible-content">
        <a href="/wiki/Diamond" title="Diamond">Diamond</a>
        <div class="icon"><a href="/wiki/Gold_Bar" title="Gold Bar">Gold Bar</a></div>
      </div>
    </div>
    <a href="/wiki/Pomfret" title="Pomfret">Pomfret</a>
  </td>
</tr>
<tr>
  <th>Liked</th>
  <td><a href="/wiki/Apple" title="Apple">Apple</a> <a href="/wiki/File:Apple.png" title="File:Apple.png">icon</a></td>
</tr>
<tr>
  <th>Neutral</th>
  <td><a href="/wiki/Stone" title="Stone">Stone</a></td>
</tr>
<tr>
  <th><img data-image-key="Hated_gift.png" src="hated.png"/></th>
  <td>
    <a href="/wiki/Trash" title="Trash">Trash</a>
    <div data-expandtext="Universal hates"><div><a href="/wiki/Bat_Wing" title="Bat Wing">Bat Wing</a></div></div>
  </td>
</tr>
</table>
'''


class TestSections(unittest.TestCase):
    """Test section lookup."""

    def test_find_gifts_section(self):
        sections = [{'index': '1', 'line': 'Biography'}, {'index': '4', 'line': 'Gifts'}]
        self.assertEqual(find_section_index(sections, 'Gifts'), '4')

    def test_missing_section(self):
        self.assertIsNone(find_section_index([{'index': '1', 'line': 'Biography'}], 'Gifts'))
        self.assertIsNone(find_section_index([], 'Gifts'))


class TestGiftTable(unittest.TestCase):
    """Test gift table parsing."""

    def setUp(self):
        self.gifts = parse_gift_table(GIFTS_HTML)

    def test_rows_classified_by_icon_and_label(self):
        self.assertEqual(self.gifts['loved'], ['Pomfret', 'Ruby'])
        self.assertEqual(self.gifts['liked'], ['Apple'])
        self.assertEqual(self.gifts['hated'], ['Trash'])
        self.assertEqual(self.gifts['disliked'], [])

    def test_universal_gifts_excluded(self):
        everything = sum(self.gifts.values(), [])
        for universal in ('Diamond', 'Gold Bar', 'Bat Wing'):
            self.assertNotIn(universal, everything)

    def test_unclassified_rows_skipped(self):
        self.assertNotIn('Stone', sum(self.gifts.values(), []))

    def test_has_gift_preferences(self):
        self.assertTrue(has_gift_preferences(self.gifts))

    def test_empty_table(self):
        gifts = parse_gift_table('')
        self.assertEqual(gifts, {'loved': [], 'liked': [], 'disliked': [], 'hated': []})
        self.assertFalse(has_gift_preferences(gifts))
        self.assertFalse(has_gift_preferences(None))


class TestHelpers(unittest.TestCase):
    """Test block removal and link extraction."""

    def test_nested_block_removed_whole(self):
        html = ('<a title="Keep">Keep</a>'
                '<div class="ci-collapsible"><div><div>x</div></div><a title="Drop">Drop</a></div>'
                '<a title="After">After</a>')
        self.assertEqual(remove_universal_blocks(html), '<a title="Keep">Keep</a><a title="After">After</a>')

    def test_link_titles_filtered(self):
        html = ('<a title="Egg">Egg</a><a title="Category:Food">c</a>'
                f'<a title="{"Long" * 13}">l</a><a title="Egg">Egg</a>')
        self.assertEqual(extract_link_titles(html), ['Egg'])


if __name__ == '__main__':
    unittest.main()
