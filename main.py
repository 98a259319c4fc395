import sys
import signal
import logging
import argparse

from core.config_loader import load_config
from core.app_context import AppContext
from database.database import create_session_factory
from database.init_db import init_db
from database.uow import job_board_uow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Global flag for graceful shutdown
running = True


def signal_handler(sig, frame):
    global running
    logger.info("Shutdown signal received")
    running = False


def run_init_db(config) -> int:
    session_factory = create_session_factory(config.database.url, pool_pre_ping=True)
    init_db(session_factory.kw["bind"])
    return 0


def run_summaries(ctx: AppContext, user_ids, display_name: str = "") -> int:
    """Summarize each user in turn. Returns the process exit code."""
    failed = 0
    completed = 0

    for user_id in user_ids:
        if not running:
            logger.info("Stopping summary batch early")
            break

        result = ctx.summarizer.summarize(user_id, display_name=display_name)
        if result.success:
            completed += 1
            logger.info(f"Summarized user {user_id}: {result.analysis}")
        else:
            failed += 1
            logger.error(f"Summary failed for user {user_id}: {result.error}")

    logger.info(f"Summary batch finished: {completed} succeeded, {failed} failed")

    if ctx.config.llm.unload_after_batch:
        ctx.ai_service.unload_model()

    return 1 if failed else 0


def _all_user_ids(ctx: AppContext):
    with job_board_uow(ctx.session_factory) as repo:
        return repo.swipes.list_user_ids()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="JobSwipe command line")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create database tables")

    summarize_parser = subparsers.add_parser("summarize", help="Generate preference summaries")
    target = summarize_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--user-id", type=str, help="Summarize a single user")
    target.add_argument("--all", action="store_true", help="Summarize every user with a ledger")
    summarize_parser.add_argument("--display-name", type=str, default="",
                                  help="Name used to address the user in the prompt")

    subparsers.add_parser("serve", help="Run the HTTP API")

    args = parser.parse_args(argv)
    config = load_config()

    if args.command == "init-db":
        return run_init_db(config)

    if args.command == "serve":
        from web.backend.app import main as serve
        serve()
        return 0

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    ctx = AppContext.build(config)
    user_ids = _all_user_ids(ctx) if args.all else [args.user_id]
    logger.info(f"Summarizing {len(user_ids)} user(s)")
    return run_summaries(ctx, user_ids, display_name=args.display_name)


if __name__ == "__main__":
    sys.exit(main())
