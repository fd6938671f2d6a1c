"""
ITTPizen client - entry point.

Run with:
    python main.py
"""

import logging
import os

from dotenv import load_dotenv

from adapter.ittpizen import IttpizenAdapter, DEFAULT_PAGE_SIZE
from core import IttpizenRepository, PreferenceStore

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_repository() -> IttpizenRepository:
    """Wire adapter, session store and repository from the environment."""
    adapter = IttpizenAdapter(
        base_url=os.environ.get("ITTPIZEN_BASE_URL"),
        timeout=float(os.environ.get("ITTPIZEN_TIMEOUT", IttpizenAdapter.DEFAULT_TIMEOUT)),
    )
    preferences = PreferenceStore(path=os.environ.get("ITTPIZEN_SESSION_FILE") or None)
    page_size = int(os.environ.get("ITTPIZEN_PAGE_SIZE", DEFAULT_PAGE_SIZE))

    logger.info(f"Backend: {adapter.base_url} (page size {page_size})")
    if preferences.current.is_logged_in:
        logger.info(f"Restored session for user {preferences.current.user_id}")

    return IttpizenRepository(adapter, preferences, page_size=page_size)


def main() -> None:
    configure_logging()
    from feature_home.cli import run
    run(create_repository())


if __name__ == "__main__":
    main()
