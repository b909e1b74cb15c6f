"""
Command-line interface for bdrss.

Meant to be run once per refresh by cron or a similar scheduler; it takes no
arguments and is configured through the environment.
"""
import os
import sys
import logging

from bdrss.config import FeedSettings, load_config
from bdrss.core.builder import generate_feed
from bdrss.exceptions import WriteError

logger = logging.getLogger(__name__)


def configure_logging():
    """
    Configure root logging for a run.
    """
    level = os.getenv('BDRSS_LOG_LEVEL', 'INFO').upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )


def run() -> int:
    """
    Generate the feed once.

    Returns:
        Process exit status
    """
    config = load_config()
    settings = FeedSettings.from_config(config)

    logger.info("Starting bdrss feed generator")
    logger.info(f"Target: {settings.target_url}")
    logger.info(f"Output: {settings.output_path}")

    outcome = generate_feed(settings)
    if outcome.fallback:
        logger.warning(f"Wrote fallback feed: {outcome.reason}")
    return 0


def main():
    """
    Entry point for the command-line script.
    """
    configure_logging()
    try:
        return run()
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        return 1
    except WriteError as e:
        logger.error(f"Could not write feed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"An error occurred: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
