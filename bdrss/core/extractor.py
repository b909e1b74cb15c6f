"""
Article extraction from the opinion page markup.
"""
import logging
from typing import List, Optional, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

from bdrss.core.article import Article
from bdrss.exceptions import ExtractionError

# Configure logging
logger = logging.getLogger(__name__)


def resolve_url(href: str, base_url: str) -> str:
    """
    Make a scraped href absolute.

    Anything that already starts with "http" is kept as is, everything else
    is appended to the base origin.
    """
    if href.startswith('http'):
        return href
    return base_url + href


def resolve_image_url(src: str, base_url: str) -> str:
    """
    Make a scraped image src absolute.

    Protocol-relative sources (``//cdn.host/x.jpg``) get the base origin's
    scheme; anything else is resolved like a link.
    """
    if src.startswith('//'):
        scheme = base_url.split('://', 1)[0] if '://' in base_url else 'https'
        return f"{scheme}:{src}"
    return resolve_url(src, base_url)


def _text(scope: Tag, selector: Optional[str]) -> str:
    """
    Stripped text of the first element matching ``selector`` inside ``scope``.

    Args:
        scope: Element to search in
        selector: CSS selector, or None for no field

    Returns:
        The text, or an empty string when nothing matches
    """
    if not selector:
        return ""
    element = scope.select_one(selector)
    if element is None:
        return ""
    return element.get_text().strip()


class ExtractionRule:
    """
    Where to find one class of article teasers and how to read them.

    Every element matching ``scope`` is a candidate. Inside it the first link
    is taken; the title, description and image are read from inside that link.
    """
    def __init__(self, name: str, scope: str, title_selector: str,
                 description_selector: Optional[str] = None,
                 image_selector: Optional[str] = 'img'):
        self.name = name
        self.scope = scope
        self.title_selector = title_selector
        self.description_selector = description_selector
        self.image_selector = image_selector

    def __repr__(self):
        return f"ExtractionRule({self.name!r}, {self.scope!r})"

    def extract(self, soup: BeautifulSoup, base_url: str) -> List[Article]:
        """
        Apply the rule to a parsed page.

        Args:
            soup: The parsed page
            base_url: Origin that relative links are resolved against

        Returns:
            Articles in document order; candidates without title or link are skipped
        """
        articles = []
        for container in soup.select(self.scope):
            link = container.find('a')
            if link is None:
                continue

            title = _text(link, self.title_selector)
            href = (link.get('href') or '').strip()
            if not title or not href:
                logger.debug(f"{self.name}: skipping candidate without title or link")
                continue

            image = None
            if self.image_selector:
                img = link.select_one(self.image_selector)
                src = (img.get('src') or '').strip() if img is not None else ''
                if src:
                    image = resolve_image_url(src, base_url)

            articles.append(Article(
                title=title,
                link=resolve_url(href, base_url),
                description=_text(link, self.description_selector),
                image=image,
            ))
        return articles


LEAD_RULE = ExtractionRule(
    'lead', 'section.Cat-lead .Cat-lead-wrapper', 'h1', description_selector='p',
)
SIDEBAR_RULE = ExtractionRule(
    'sidebar', 'section.Cat-lead .Cat-list', 'h5',
)
READ_MORE_RULE = ExtractionRule(
    'read-more', 'section.Cat-readMore .rm-container', 'h5, h4, h3',
)

DEFAULT_RULES = (LEAD_RULE, SIDEBAR_RULE, READ_MORE_RULE)


def extract_articles(markup: str, base_url: str,
                     rules: Sequence[ExtractionRule] = DEFAULT_RULES) -> List[Article]:
    """
    Run the extraction rules over a page, in order, and concatenate the results.

    Args:
        markup: HTML of the page
        base_url: Origin that relative links are resolved against
        rules: Rules to apply

    Returns:
        List of Article objects
    """
    if not isinstance(markup, str):
        raise ExtractionError(f"Expected page markup as text, got {type(markup).__name__}")

    soup = BeautifulSoup(markup, 'html.parser')

    articles = []
    for rule in rules:
        found = rule.extract(soup, base_url)
        logger.debug(f"{rule.name}: {len(found)} articles")
        articles.extend(found)
    return articles
