"""Entry point: run one sniper pass over every tracking target, then exit.

Scheduling is left to cron or a similar external scheduler.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from price_sniper import metrics
from price_sniper.config import ConfigurationError, Settings, load_settings
from price_sniper.db.session import create_engine, create_session_factory
from price_sniper.ingest.base import RegistryUnavailableError
from price_sniper.logging_config import setup_logging
from price_sniper.worker.tasks import SniperRunner

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REGISTRY_UNAVAILABLE = 1
EXIT_BAD_CONFIG = 2


async def run_once(settings: Settings, target_id: Optional[int] = None) -> int:
    """
    Run a single pass.

    Args:
        settings: Validated settings
        target_id: Only check this target

    Returns:
        Process exit code
    """
    engine = create_engine(settings)
    try:
        runner = SniperRunner.from_settings(settings, create_session_factory(engine))
        await runner.run(target_id=target_id)
    except RegistryUnavailableError as e:
        logger.critical(f"Registry unavailable, aborting run: {e}")
        return EXIT_REGISTRY_UNAVAILABLE
    finally:
        await engine.dispose()
        metrics.push_metrics(settings.pushgateway_url, settings.metrics_job)

    return EXIT_OK


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Check prices and stock for all tracking targets",
    )
    parser.add_argument(
        "--target-id",
        type=int,
        default=None,
        help="Check only this target (default: all tracking targets)",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Directory to place the logs/ folder in (default: current directory)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(str(e), file=sys.stderr)
        return EXIT_BAD_CONFIG

    setup_logging(settings.log_level, base_dir=args.log_dir or settings.log_dir)
    logger.info("Starting price sniper run...")

    return asyncio.run(run_once(settings, target_id=args.target_id))


if __name__ == "__main__":
    sys.exit(main())
