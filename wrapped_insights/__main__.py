"""Entry point for wrapped summary generation"""
import glob
import json
import logging
import os
import sys
import traceback
from typing import List, Optional

from sqlalchemy.orm import Session

from wrapped_insights.config import Settings, load_settings
from wrapped_insights.db import db
from wrapped_insights.errors import ConfigurationError, InsufficientDataError
from wrapped_insights.services.snapshot_loader import load_snapshot_file
from wrapped_insights.services.storage import InMemorySummaryCache, SqlSummaryCache, WrappedService
from wrapped_insights.utils.json_encoder import SummaryEncoder, json_dumps
from wrapped_insights.wrapped import WrappedAggregator

logger = logging.getLogger(__name__)


def build_service(config: Settings, session: Optional[Session] = None) -> WrappedService:
    """Wire the aggregator to the SQL cache when given a session, else to an in-memory one"""
    aggregator = WrappedAggregator(config.ENGINE, version=config.SUMMARY_VERSION)
    if session is not None:
        return WrappedService(aggregator, SqlSummaryCache(session, ttl_seconds=config.CACHE_TTL_SECONDS))
    return WrappedService(aggregator, InMemorySummaryCache(ttl_seconds=config.CACHE_TTL_SECONDS))


def summarize_files(service: WrappedService, input_files: List[str]) -> dict:
    results = {"summaries": [], "errors": []}
    for path in input_files:
        try:
            snapshot = load_snapshot_file(path)
        except (InsufficientDataError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Skipping {path}: {e}")
            results["errors"].append({"file": os.path.basename(path), "error": str(e)})
            continue
        results["summaries"].append(service.get_summary(snapshot))
    return results


def run(config: Optional[Settings] = None) -> dict:
    """Generate summaries for all snapshot files in the input directory."""
    config = config or load_settings()

    # Validate input directory
    input_files = sorted(glob.glob(os.path.join(config.INPUT_DIR, "*.json")))
    if not input_files:
        raise FileNotFoundError(f"No input files found in {config.INPUT_DIR}")

    # Log config (thresholds only, the database URL may carry credentials)
    logger.info("Using configuration:")
    logger.info(json_dumps(config.model_dump(exclude={"DATABASE_URL"}), indent=2))

    if config.DATABASE_URL:
        if not db.initialized:
            db.init(config.DATABASE_URL)
        with db.session() as session:
            results = summarize_files(build_service(config, session), input_files)
    else:
        results = summarize_files(build_service(config), input_files)

    # Save results
    os.makedirs(config.OUTPUT_DIR, exist_ok=True)
    output_path = os.path.join(config.OUTPUT_DIR, "results.json")
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(results, f, indent=2, cls=SummaryEncoder)

    logger.info(f"Wrapped generation complete: {len(results['summaries'])} summaries, "
                f"{len(results['errors'])} skipped files, written to {output_path}")
    return results


def main() -> None:
    logging.basicConfig(level=logging.INFO, format='%(message)s')
    try:
        config = load_settings()
        logging.getLogger().setLevel(getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
        run(config)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)
    except Exception as e:
        logger.error(f"Error during wrapped generation: {e}")
        traceback.print_exc()
        sys.exit(1)
    finally:
        db.dispose()


if __name__ == "__main__":
    main()
