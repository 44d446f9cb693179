"""
Coral Island Wiki Client

Rate-limited access to the Coral Island Fandom wiki through the MediaWiki API.
Every request is preceded by a fixed delay and requests are issued strictly
one at a time. Failures are logged and returned as None or an empty result;
callers decide whether missing data matters.
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Set
from urllib.parse import quote

import requests

import infobox_parser

logger = logging.getLogger(__name__)

WIKI_BASE = "https://coralisland.fandom.com"
DEFAULT_DELAY = 0.3
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_TIMEOUT = 30

# Namespaces that never hold item pages
NON_CONTENT_PREFIXES = ('Category:', 'Talk:', 'File:', 'Template:', 'User:', 'User talk:', 'Module:')


def category_title(category: str) -> str:
    """Normalize "Spring_insects" or "Category:Spring insects" to a full category title"""
    name = category.replace('_', ' ').strip()
    if not name.startswith('Category:'):
        name = f'Category:{name}'
    return name


class WikiClient:
    """Sequential, politeness-limited MediaWiki API client"""

    def __init__(self, base_url: str = WIKI_BASE, delay: float = DEFAULT_DELAY,
                 retry_delay: float = DEFAULT_RETRY_DELAY, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url
        self.api_url = f"{base_url}/api.php"
        self.delay = delay
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'CoralIslandScraper/1.0 (collection tracker; sequential, rate limited)'
        })

    def _api_get(self, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Issue one API call after the mandatory delay

        Args:
            params: Query parameters; format=json is added

        Returns:
            Decoded JSON envelope, or None on transport errors, non-2xx
            status, malformed JSON, or an "error" entry in the envelope
        """
        params = dict(params, format='json')
        target = params.get('page') or params.get('cmtitle') or params.get('titles')
        time.sleep(self.delay)

        try:
            response = self.session.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request failed for {target}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Malformed JSON from API: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning("Unexpected API payload")
            return None

        if 'error' in data:
            error = data['error']
            code = error.get('code') if isinstance(error, dict) else error
            logger.warning(f"API error for {target}: {code}")
            return None

        return data

    @staticmethod
    def _parse_text(data: Optional[Dict[str, Any]]) -> Optional[str]:
        if not data:
            return None
        text = (data.get('parse') or {}).get('text')
        if isinstance(text, dict):
            text = text.get('*')
        return text or None

    def fetch_page_html(self, title: str) -> Optional[str]:
        """Fetch the rendered HTML of a page"""
        data = self._api_get({'action': 'parse', 'page': title, 'prop': 'text'})
        return self._parse_text(data)

    def fetch_sections(self, title: str) -> List[Dict[str, str]]:
        """
        Fetch the section list of a page

        Returns:
            List of {"index": "3", "line": "Gifts"} dictionaries
        """
        data = self._api_get({'action': 'parse', 'page': title, 'prop': 'sections'})
        if not data:
            return []
        sections = (data.get('parse') or {}).get('sections') or []
        return [
            {'index': str(section.get('index', '')), 'line': section.get('line', '')}
            for section in sections if isinstance(section, dict)
        ]

    def fetch_section_html(self, title: str, section_index: str) -> Optional[str]:
        """Fetch the rendered HTML of one section of a page"""
        data = self._api_get({
            'action': 'parse',
            'page': title,
            'prop': 'text',
            'section': section_index,
        })
        return self._parse_text(data)

    def fetch_category_members(self, category: str) -> Set[str]:
        """
        Get all main-namespace page titles in a category

        Follows cmcontinue pagination for categories with more than 500 members.

        Args:
            category: Category name, with or without the "Category:" prefix

        Returns:
            Set of page titles (empty on failure)
        """
        cmtitle = category_title(category)
        members: Set[str] = set()
        continue_param = None

        while True:
            params = {
                'action': 'query',
                'list': 'categorymembers',
                'cmtitle': cmtitle,
                'cmlimit': 500,
            }
            if continue_param:
                params['cmcontinue'] = continue_param

            data = self._api_get(params)
            if not data:
                break

            for member in (data.get('query') or {}).get('categorymembers') or []:
                # Only include main namespace pages (ns=0)
                if member.get('ns') == 0 and member.get('title'):
                    members.add(member['title'])

            continue_param = (data.get('continue') or {}).get('cmcontinue')
            if not continue_param:
                break

        logger.debug(f"Found {len(members)} pages in {cmtitle}")
        return members

    def fetch_page_categories(self, title: str) -> List[str]:
        """Get the category names of a page, without the "Category:" prefix"""
        data = self._api_get({
            'action': 'query',
            'titles': title,
            'prop': 'categories',
            'cllimit': 500,
        })
        if not data:
            return []

        pages = (data.get('query') or {}).get('pages') or {}
        page_list = list(pages.values()) if isinstance(pages, dict) else list(pages)
        if not page_list:
            return []

        categories = []
        for category in page_list[0].get('categories') or []:
            name = category.get('title', '')
            if name.startswith('Category:'):
                name = name[len('Category:'):]
            if name:
                categories.append(name)
        return categories

    def members(self, category: str, skip: Iterable[str] = ()) -> Set[str]:
        """
        Resolve a category to its item titles

        Drops non-content namespaces and the category's own non-item pages.
        """
        skip = set(skip)
        return {
            title for title in self.fetch_category_members(category)
            if title not in skip and not title.startswith(NON_CONTENT_PREFIXES)
        }

    def fetch_with_retry(self, title: str, retries: int = 1) -> Optional[str]:
        """Fetch page HTML, retrying after a longer cooldown when it comes back empty"""
        for attempt in range(retries + 1):
            html = self.fetch_page_html(title)
            if html:
                return html
            if attempt < retries:
                logger.info(f"Retrying {title} in {self.retry_delay}s")
                time.sleep(self.retry_delay)

        logger.warning(f"Giving up on {title} after {retries + 1} attempts")
        return None

    def fetch_item_details(self, title: str, retries: int = 1) -> Optional[Dict[str, Any]]:
        """Fetch a page and parse its infobox, or None when the page can't be fetched"""
        html = self.fetch_with_retry(title, retries)
        if html is None:
            return None
        return infobox_parser.parse_infobox(html)

    def page_url(self, title: str) -> str:
        return f"{self.base_url}/wiki/{quote(title.replace(' ', '_'))}"
