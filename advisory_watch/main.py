#!/usr/bin/env python3
"""Main entry point for the security advisory monitor."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .config import Settings, load_settings
from .errors import AdvisoryWatchError
from .fetchers.github import fetch_advisories
from .models import Advisory
from .notify import send_google_chat
from .reporting import StatusReporter, reporter_from_settings
from .storage import Storage, diff


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def run_once(
    settings: Settings,
    storage: Optional[Storage] = None,
    reporter: Optional[StatusReporter] = None,
    dry_run: bool = False,
) -> List[Advisory]:
    """Run one check: fetch, diff against the snapshot, notify, save, report."""
    logger = logging.getLogger(__name__)
    storage = storage or Storage(settings.data_file)
    reporter = reporter or reporter_from_settings(settings)

    logger.info(f"Checking security advisories for {settings.repo}")
    logger.info(f"Environment: {settings.environment_name}")
    logger.info(f"Started at: {datetime.now().astimezone().isoformat(timespec='seconds')}")

    current = fetch_advisories(
        settings.repo,
        timeout=settings.request_timeout,
        user_agent=settings.user_agent,
    )
    logger.info(f"Found {len(current)} published advisories")

    previous = storage.load()
    new_advisories = diff(current, previous)

    if not new_advisories:
        logger.info("No new security advisories")
        if not dry_run:
            storage.save(current)
            reporter.report(False)
        return new_advisories

    logger.info(f"Found {len(new_advisories)} new security advisories:")
    for adv in new_advisories:
        logger.info(f"  - [{(adv.severity or 'unknown').upper()}] {adv.summary}")
        logger.info(f"    {adv.html_url}")

    if dry_run:
        logger.info(f"[DRY RUN] Would send {len(new_advisories)} advisories to Google Chat")
        return new_advisories

    send_google_chat(
        new_advisories,
        settings.webhook_url,
        repo=settings.repo,
        zone=settings.tzinfo(),
        timeout=settings.request_timeout,
    )
    storage.save(current)
    reporter.report(True)
    logger.info("Done")
    return new_advisories


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Notify Google Chat about new GitHub security advisories"
    )
    parser.add_argument(
        "--config",
        help="Path to config YAML file (optional)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print what would be sent without sending or saving state",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-file",
        help="Path to log file",
    )

    args = parser.parse_args()

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    # Load config
    try:
        settings = load_settings(args.config)
    except FileNotFoundError as e:
        logging.error(f"Configuration error: {e}")
        sys.exit(1)
    except Exception as e:
        logging.error(f"Error loading config: {e}")
        sys.exit(1)

    # Run
    try:
        run_once(settings, dry_run=args.dry_run)
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        sys.exit(130)
    except AdvisoryWatchError as e:
        logging.error(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        logging.exception(f"Error during execution: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
