"""Command line entry point: ``python -m keeper`` or ``pool-keeper``."""
import argparse
import logging
import signal
import sys

from keeper.core.config import load_config, ConfigError
from keeper.core.orchestrator import Orchestrator

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
NOISY_LOGGERS = ("aiohttp", "httpx", "httpcore", "tronpy")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pool-keeper",
        description="Checks managed liquidity pools and rebalances them when due",
    )
    parser.add_argument(
        "-c", "--config",
        default="config/default.yaml",
        help="YAML configuration file (default: config/default.yaml)",
    )
    parser.add_argument(
        "-e", "--env-file",
        default=None,
        help=".env file with PRIVATE_KEY / APP_URL (default: search from cwd)",
    )
    parser.add_argument(
        "-l", "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single monitoring cycle and exit",
    )
    return parser


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments (defaults to sys.argv[1:])."""
    return build_parser().parse_args(args)


def setup_logging(level: str) -> None:
    """Send application logs to stdout at ``level``; third-party clients stay at WARNING."""
    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_uncaught_exception(exc_type, exc_value, exc_traceback) -> None:
    """sys.excepthook that routes uncaught errors through logging."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))


def install_signal_handlers(orchestrator: Orchestrator) -> None:
    """Ask the orchestrator to stop on SIGINT/SIGTERM.

    The monitor finishes its current sleep step before exiting, so
    in-flight pool checks are never cut off mid-transaction.
    """
    def handle(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, shutting down...")
        orchestrator.stop()

    for signum in (signal.SIGINT, signal.SIGTERM):
        signal.signal(signum, handle)


def main(args: list[str] | None = None) -> int:
    """Run the keeper.

    Returns:
        Process exit code: 0 on clean shutdown, 1 on configuration or
        startup failure
    """
    options = parse_args(args)

    setup_logging(options.log_level)
    sys.excepthook = log_uncaught_exception

    mode = "single cycle" if options.once else "poll loop"
    logger.info(f"Pool Keeper starting ({mode}, config={options.config})")

    try:
        config = load_config(options.config, env_path=options.env_file)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    orchestrator = None
    try:
        orchestrator = Orchestrator(config)
        install_signal_handlers(orchestrator)
        orchestrator.start(once=options.once)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Keeper failed: {e}")
        return 1
    finally:
        if orchestrator is not None and orchestrator.is_running:
            orchestrator.stop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
