import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional

from services.config import ConfigError, load_config
from services.logging import setup_logging
from services.scheduler import DailyScheduler
from workflows.pipeline_factory import create_pipeline_from_config

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Daily AI news digest agent")
    parser.add_argument(
        "-n",
        "--now",
        action="store_true",
        help="Run the workflow once immediately in addition to starting the scheduler",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def _run_now(scheduler: DailyScheduler) -> None:
    try:
        result = await scheduler.run_now()
        logger.info(f"Workflow completed successfully: {result}")
    except Exception as e:
        logger.exception(f"Error running workflow: {e}")


async def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    logger.info("AI News Agent starting")

    try:
        config = load_config()
    except ConfigError as e:
        for name in e.missing:
            logger.error(f"Missing required configuration: {name}")
        logger.error("Set them in resources/config.yml or a .env file")
        return 1

    pipeline = create_pipeline_from_config(config)
    await pipeline.store.initialize()

    if not await pipeline.classifier.llm.health_check():
        logger.warning(f"Ollama not reachable at {config.OLLAMA_BASE_URL}; runs will drop articles until it is")

    # ----------------------------
    # Scheduler lifecycle
    # ----------------------------
    scheduler = DailyScheduler(
        pipeline.run,
        hour=config.SCHEDULE_HOUR,
        minute=config.SCHEDULE_MINUTE,
    )

    shutdown = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown.set)

    scheduler.start()
    logger.info("Scheduler is running. Press Ctrl+C to stop.")

    immediate: Optional[asyncio.Task] = None
    if args.now:
        logger.info("Running workflow immediately (--now flag detected)")
        immediate = asyncio.create_task(_run_now(scheduler))

    await shutdown.wait()

    logger.info("Shutting down gracefully")
    await scheduler.stop()
    if immediate is not None:
        await immediate
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
