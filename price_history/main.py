"""Command line entry point: print a historical price series as JSON.

Usage:
    python -m price_history.main WEEK
"""

import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if it exists
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

# Imports after logging setup (required for proper logging configuration)
from price_history.config import HistoryConfig  # noqa: E402
from price_history.ingestion.historical_ingestor import HistoricalIngestor  # noqa: E402
from price_history.sources.base import HistoricalDataError  # noqa: E402
from price_history.sources.gdax import GdaxHistoricalSource  # noqa: E402


def main(argv=None) -> int:
    """Fetch the requested interval and write the series to stdout."""
    args = sys.argv[1:] if argv is None else argv
    interval_label = args[0] if args else os.getenv("HISTORY_INTERVAL", "WEEK")

    logger.info(f"🚀 Fetching {interval_label} price history...")

    try:
        config = HistoryConfig.from_env()
        config.validate()
    except ValueError as e:
        logger.error(f"❌ Configuration invalid: {e}")
        return 1

    logger.info("✅ Configuration loaded")
    logger.info(f"   - API URL: {config.api_url}")
    logger.info(f"   - Product: {config.product_id}")

    source = GdaxHistoricalSource(
        product_id=config.product_id,
        api_url=config.api_url,
        timeout=config.request_timeout,
    )
    ingestor = HistoricalIngestor(source)

    try:
        series = ingestor.get_historical_series(interval_label)
    except HistoricalDataError as e:
        logger.error(f"❌ Failed to fetch price history: {e.message}")
        print(json.dumps(e.to_dict()))
        return 1

    print(json.dumps([point.to_dict() for point in series]))
    logger.info(f"✅ Returned {len(series)} price points")
    return 0


if __name__ == "__main__":
    sys.exit(main())
