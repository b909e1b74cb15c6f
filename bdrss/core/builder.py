"""
Feed generation pipeline for bdrss.

fetch -> extract -> truncate -> render -> write, with a one-item fallback
feed whenever anything before the final write goes wrong.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from bdrss.config import FeedSettings
from bdrss.core.article import Article
from bdrss.core.extractor import extract_articles
from bdrss.exceptions import WriteError
from bdrss.fetchers.flaresolverr import FlareSolverrFetcher
from bdrss.formatters.rss import FeedChannel, RssFormatter

# Configure logging
logger = logging.getLogger(__name__)

NO_ARTICLES_TITLE = "No articles found yet"
NO_ARTICLES_DESCRIPTION = "RSS feed could not scrape any articles."
FAILED_TITLE = "Feed generation failed"
FAILED_DESCRIPTION = "An error occurred during scraping."
FALLBACK_TITLE_SUFFIX = " (dummy feed)"
FALLBACK_CHANNEL_DESCRIPTION = "RSS feed could not scrape, showing placeholder"


@dataclass
class ScrapeResult:
    """
    Outcome of the fetch-and-extract stage: articles, or the reason there are none.
    """
    articles: List[Article] = field(default_factory=list)
    error: Optional[str] = None
    exception: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, articles: List[Article]) -> "ScrapeResult":
        return cls(articles=list(articles))

    @classmethod
    def failure(cls, exception: BaseException) -> "ScrapeResult":
        return cls(error=str(exception) or type(exception).__name__, exception=exception)


@dataclass
class FeedOutcome:
    """
    What a generation run ended up writing.
    """
    path: Path
    item_count: int
    fallback: bool = False
    reason: Optional[str] = None


def ensure_output_dir(path: Path) -> None:
    """Create the directory holding the feed file if it is missing."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(f"Cannot create output directory {path.parent}: {e}") from e


def write_feed(path: Path, xml: str) -> None:
    """
    Overwrite the feed file.

    Raises:
        WriteError: If the file cannot be written
    """
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(xml)
    except OSError as e:
        raise WriteError(f"Cannot write feed to {path}: {e}") from e


def scrape(settings: FeedSettings, fetcher=None) -> ScrapeResult:
    """
    Fetch the target page and extract its articles.

    Never raises; failures come back as a failed ScrapeResult.

    Args:
        settings: Run settings
        fetcher: Object with a ``fetch(url) -> str`` method; a FlareSolverrFetcher by default

    Returns:
        ScrapeResult
    """
    if fetcher is None:
        fetcher = FlareSolverrFetcher(
            settings.proxy_url,
            max_timeout_ms=settings.proxy_max_timeout_ms,
            timeout=settings.proxy_timeout,
        )

    try:
        html = fetcher.fetch(settings.target_url)
        articles = extract_articles(html, settings.base_url)
    except Exception as e:
        return ScrapeResult.failure(e)

    logger.info(f"Found {len(articles)} articles")
    return ScrapeResult.success(articles)


def feed_channel(settings: FeedSettings) -> FeedChannel:
    """
    Channel metadata for the regular feed.

    Args:
        settings: Run settings

    Returns:
        FeedChannel instance
    """
    return FeedChannel(
        title=settings.feed_title,
        description=settings.feed_description,
        feed_url=settings.feed_url,
        site_url=settings.base_url,
        language=settings.language,
    )


def fallback_channel(settings: FeedSettings) -> FeedChannel:
    """
    Channel metadata for the placeholder feed written after a failure.

    Args:
        settings: Run settings

    Returns:
        FeedChannel instance
    """
    return FeedChannel(
        title=settings.feed_title + FALLBACK_TITLE_SUFFIX,
        description=FALLBACK_CHANNEL_DESCRIPTION,
        feed_url=settings.feed_url,
        site_url=settings.base_url,
        language=settings.language,
    )


def select_items(articles: List[Article], settings: FeedSettings) -> List[Article]:
    """
    Keep the first ``settings.limit`` articles, or a placeholder when there are none.
    """
    items = list(articles[:settings.limit])
    if len(articles) > len(items):
        logger.debug(f"Dropping {len(articles) - len(items)} articles over the limit of {settings.limit}")

    if not items:
        logger.warning("No articles found, creating placeholder item")
        items.append(Article(
            title=NO_ARTICLES_TITLE,
            link=settings.base_url,
            description=NO_ARTICLES_DESCRIPTION,
        ))
    return items


def write_fallback_feed(settings: FeedSettings, reason: str,
                        formatter: Optional[RssFormatter] = None,
                        now: Optional[datetime] = None) -> FeedOutcome:
    """
    Write the one-item feed announcing that generation failed.

    Raises:
        WriteError: If the file cannot be written; there is no further fallback
    """
    formatter = formatter or RssFormatter()
    item = Article(title=FAILED_TITLE, link=settings.base_url, description=FAILED_DESCRIPTION)
    xml = formatter.render(fallback_channel(settings), [item], now)
    write_feed(settings.output_path, xml)
    logger.info(f"Fallback feed written to {settings.output_path}")
    return FeedOutcome(path=settings.output_path, item_count=1, fallback=True, reason=reason)


def generate_feed(settings: FeedSettings, fetcher=None,
                  now: Optional[datetime] = None) -> FeedOutcome:
    """
    Produce the feed file, real or fallback.

    Args:
        settings: Run settings
        fetcher: Page fetcher override, mainly for tests
        now: Generation time (defaults to the current UTC time)

    Returns:
        FeedOutcome describing what was written

    Raises:
        WriteError: If the output directory or the fallback feed cannot be written
    """
    now = now or datetime.now(timezone.utc)
    formatter = RssFormatter()
    ensure_output_dir(settings.output_path)

    result = scrape(settings, fetcher)
    if not result.ok:
        logger.error(f"Error generating RSS: {result.error}")
        return write_fallback_feed(settings, result.error, formatter, now)

    try:
        items = select_items(result.articles, settings)
        xml = formatter.render(feed_channel(settings), items, now)
        write_feed(settings.output_path, xml)
    except Exception as e:
        reason = str(e) or type(e).__name__
        logger.error(f"Error generating RSS: {reason}")
        return write_fallback_feed(settings, reason, formatter, now)

    logger.info(f"RSS generated with {len(items)} items at {settings.output_path}")
    return FeedOutcome(path=settings.output_path, item_count=len(items))
