"""
Edge Ingest CLI
Main entry point for running the ingest pipeline.

  python -m edge_ingest              # Run forever
  python -m edge_ingest --once       # Run a single pull/process/ack cycle
  python -m edge_ingest --validate   # Check configuration and exit
"""

import argparse
import logging
import sys

import requests

from .clients import (
    DeviceConfigStore,
    InferenceClient,
    ObjectStore,
    PubSubChannel,
    create_session,
    subscription_path,
)
from .config import Config, describe_config, load_config
from .errors import ConfigError, CredentialsError
from .processor import DashboardRule, Orchestrator, PipelineSettings, create_notifier
from .utils import Backoff

logger = logging.getLogger(__name__)


def setup_logging(quiet: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
    """
    level = logging.WARNING if quiet else logging.INFO

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("edge_ingest.", "ei.")
            return super().format(record)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Edge Ingest - store device images, detect objects, switch dashboards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m edge_ingest                    # Run forever
  python -m edge_ingest -c prod.yaml       # Use a specific config file
  python -m edge_ingest --once             # One pull/process/ack cycle
  python -m edge_ingest --validate         # Check config and exit

Environment Variables (override the config file):
  PROJECT, INPUT_SUBSCRIPTION, SAVE_BUCKET, BLOCKS_URL, BLOCKS_TOKEN,
  ML_MODEL, IOT_REGISTRY, IOT_REGION
        """,
    )

    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to config file (default: search for config.yaml)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration, print the summary and exit",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single pull/process/ack cycle and exit",
    )

    return parser.parse_args(argv)


def build_settings(config: Config) -> PipelineSettings:
    """Map validated config onto orchestrator settings."""
    return PipelineSettings(
        project=config.project,
        bucket=config.storage.bucket,
        model=config.inference.model,
        score_threshold=config.inference.score_threshold,
        rules=tuple(DashboardRule(r.label, r.url) for r in config.dashboard.rules),
        default_url=config.dashboard.default_url,
        debounce_seconds=config.device_config.debounce_seconds,
        version_guard=config.device_config.version_guard,
        ack_failed_messages=config.runtime.ack_failed_messages,
        content_type=config.storage.content_type,
    )


def build_orchestrator(config: Config, session: requests.Session) -> Orchestrator:
    """Construct every client once around the shared authorized session."""
    channel = PubSubChannel(
        session,
        subscription_path(config.project, config.subscription.name),
        max_messages=config.subscription.max_messages,
        connect_timeout=config.subscription.connect_timeout,
        read_timeout=config.subscription.read_timeout,
        backoff=Backoff(config.runtime.backoff_base_seconds, config.runtime.backoff_max_seconds),
    )
    store = ObjectStore(session, timeout=config.storage.timeout)
    config_store = DeviceConfigStore(
        session,
        project=config.project,
        registry=config.device_config.registry,
        region=config.device_config.region,
        timeout=config.device_config.timeout,
    )
    inference = InferenceClient(
        session,
        model_version=config.inference.version,
        timeout=config.inference.timeout,
    )
    notifier = create_notifier(config.webhook.model_dump())

    return Orchestrator(
        channel=channel,
        store=store,
        notifier=notifier,
        config_store=config_store,
        inference=inference,
        settings=build_settings(config),
    )


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.quiet)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    for line in describe_config(config):
        logger.info(line)

    if args.validate:
        logger.info("Configuration valid")
        return

    try:
        session = create_session()
    except CredentialsError as e:
        logger.error(str(e))
        sys.exit(1)

    orchestrator = build_orchestrator(config, session)

    try:
        orchestrator.run(max_cycles=1 if args.once else None)
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
    finally:
        session.close()


if __name__ == "__main__":
    main()
