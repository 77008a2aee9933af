import argparse
import logging

from entrywatch.config import load_settings
from entrywatch.worker import run_check_once, run_forever


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="entrywatch: Global Entry appointment watcher")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--once", action="store_true", help="Run single check and exit (default)")
    mode.add_argument("--forever", action="store_true", help="Keep checking every CHECK_INTERVAL_SECONDS")
    args = parser.parse_args()

    _setup_logging()
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings()

        if args.forever:
            run_forever(settings)
            return 0

        run_check_once(settings)
        return 0

    except Exception:
        logger.exception("Fatal error")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
