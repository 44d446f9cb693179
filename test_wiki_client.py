#!/usr/bin/env python3
"""
Tests for the wiki client.

The requests session is replaced with a mock, so no test touches the network.
"""

import unittest
from unittest.mock import MagicMock, call, patch

import requests

from wiki_client import WikiClient, category_title


def make_response(payload):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


def parse_payload(html):
    return {'parse': {'title': 'Page', 'text': {'*': html}}}


def make_client(session, **kwargs):
    kwargs.setdefault('delay', 0)
    kwargs.setdefault('retry_delay', 0)
    return WikiClient(session=session, **kwargs)


class TestCategoryTitle(unittest.TestCase):
    """Test category name normalization."""

    def test_prefix_and_underscores(self):
        self.assertEqual(category_title("Spring_insects"), "Category:Spring insects")
        self.assertEqual(category_title("Category:Fish"), "Category:Fish")


class TestFetching(unittest.TestCase):
    """Test page fetches and failure handling."""

    def setUp(self):
        self.session = MagicMock()
        self.client = make_client(self.session)

    def test_fetch_page_html(self):
        self.session.get.return_value = make_response(parse_payload("<p>Salmon</p>"))

        self.assertEqual(self.client.fetch_page_html("Salmon"), "<p>Salmon</p>")
        params = self.session.get.call_args.kwargs['params']
        self.assertEqual(params['action'], 'parse')
        self.assertEqual(params['page'], 'Salmon')
        self.assertEqual(params['format'], 'json')

    def test_error_envelope_is_no_data(self):
        self.session.get.return_value = make_response({'error': {'code': 'missingtitle'}})
        self.assertIsNone(self.client.fetch_page_html("Nope"))

    def test_transport_error_is_no_data(self):
        self.session.get.side_effect = requests.exceptions.Timeout("timed out")
        self.assertIsNone(self.client.fetch_page_html("Salmon"))

    def test_http_error_is_no_data(self):
        response = make_response({})
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("503")
        self.session.get.return_value = response
        self.assertIsNone(self.client.fetch_page_html("Salmon"))

    def test_malformed_json_is_no_data(self):
        response = make_response(None)
        response.json.side_effect = ValueError("Expecting value")
        self.session.get.return_value = response
        self.assertIsNone(self.client.fetch_page_html("Salmon"))

    def test_timeout_passed_to_every_call(self):
        client = make_client(self.session, timeout=12)
        self.session.get.return_value = make_response(parse_payload("x"))
        client.fetch_page_html("Salmon")
        self.assertEqual(self.session.get.call_args.kwargs['timeout'], 12)

    @patch('wiki_client.time.sleep')
    def test_delay_before_each_request(self, mock_sleep):
        client = make_client(self.session, delay=0.3)
        self.session.get.return_value = make_response(parse_payload("x"))

        client.fetch_page_html("A")
        client.fetch_page_html("B")

        self.assertEqual(mock_sleep.call_args_list, [call(0.3), call(0.3)])


class TestRetry(unittest.TestCase):
    """Test the single retry after a failed fetch."""

    def setUp(self):
        self.session = MagicMock()

    @patch('wiki_client.time.sleep')
    def test_retry_after_failure(self, mock_sleep):
        client = make_client(self.session, retry_delay=1.0)
        self.session.get.side_effect = [
            requests.exceptions.ConnectionError("reset"),
            make_response(parse_payload("<p>ok</p>")),
        ]

        self.assertEqual(client.fetch_with_retry("Salmon"), "<p>ok</p>")
        self.assertEqual(self.session.get.call_count, 2)
        self.assertIn(call(1.0), mock_sleep.call_args_list)

    def test_gives_up_after_one_retry(self):
        client = make_client(self.session)
        self.session.get.side_effect = requests.exceptions.ConnectionError("down")

        self.assertIsNone(client.fetch_with_retry("Salmon"))
        self.assertIsNone(client.fetch_item_details("Salmon"))
        self.assertEqual(self.session.get.call_count, 4)

    def test_item_details_parses_infobox(self):
        client = make_client(self.session)
        html = ('<div class="pi-item pi-data" data-source="rarity"><h3 class="pi-data-label">Rarity</h3>'
                '<div class="pi-data-value pi-font">Rare</div></div>')
        self.session.get.return_value = make_response(parse_payload(html))

        self.assertEqual(client.fetch_item_details("Salmon"), {'rarity': 'rare'})


class TestCategories(unittest.TestCase):
    """Test category membership and page categories."""

    def setUp(self):
        self.session = MagicMock()
        self.client = make_client(self.session)

    def test_members_follow_continuation(self):
        self.session.get.side_effect = [
            make_response({
                'continue': {'cmcontinue': 'page|TUNA', 'continue': '-||'},
                'query': {'categorymembers': [
                    {'ns': 0, 'title': 'Salmon'},
                    {'ns': 14, 'title': 'Category:Rare fish'},
                ]},
            }),
            make_response({'query': {'categorymembers': [{'ns': 0, 'title': 'Tuna'}]}}),
        ]

        self.assertEqual(self.client.fetch_category_members("Fish"), {'Salmon', 'Tuna'})

        first, second = self.session.get.call_args_list
        self.assertEqual(first.kwargs['params']['cmtitle'], 'Category:Fish')
        self.assertNotIn('cmcontinue', first.kwargs['params'])
        self.assertEqual(second.kwargs['params']['cmcontinue'], 'page|TUNA')

    def test_members_failure_is_empty(self):
        self.session.get.side_effect = requests.exceptions.ConnectionError("down")
        self.assertEqual(self.client.fetch_category_members("Fish"), set())

    def test_members_drop_skipped_and_non_content_pages(self):
        self.session.get.return_value = make_response({'query': {'categorymembers': [
            {'ns': 0, 'title': 'Fish'},
            {'ns': 0, 'title': 'Fish/beta'},
            {'ns': 0, 'title': 'Template:Fish'},
            {'ns': 0, 'title': 'Salmon'},
        ]}})

        self.assertEqual(self.client.members("Fish", {"Fish", "Fish/beta"}), {'Salmon'})

    def test_page_categories(self):
        self.session.get.return_value = make_response({'query': {'pages': {'42': {
            'title': 'Ruby',
            'categories': [{'ns': 14, 'title': 'Category:Super rare gem'}, {'ns': 14, 'title': 'Category:Gems'}],
        }}}})

        self.assertEqual(self.client.fetch_page_categories("Ruby"), ['Super rare gem', 'Gems'])

    def test_sections(self):
        self.session.get.return_value = make_response({'parse': {'sections': [
            {'index': '1', 'line': 'Biography'},
            {'index': 4, 'line': 'Gifts'},
        ]}})

        self.assertEqual(self.client.fetch_sections("Emily"), [
            {'index': '1', 'line': 'Biography'},
            {'index': '4', 'line': 'Gifts'},
        ])

    def test_section_html(self):
        self.session.get.return_value = make_response(parse_payload("<table></table>"))

        self.assertEqual(self.client.fetch_section_html("Emily", "4"), "<table></table>")
        self.assertEqual(self.session.get.call_args.kwargs['params']['section'], "4")

    def test_page_url(self):
        self.assertEqual(self.client.page_url("Mayor Connor"), "https://coralisland.fandom.com/wiki/Mayor_Connor")


if __name__ == '__main__':
    unittest.main()
