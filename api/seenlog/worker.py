"""RQ worker entrypoint for progress side effects and summary recomputes."""

from __future__ import annotations

import argparse
import logging
import socket

from redis import Redis
from rq import Queue, Worker

from seenlog.core.config import settings

WORKER_LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"

logger = logging.getLogger("seenlog.worker")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a Seenlog background worker")
    parser.add_argument(
        "--queues",
        nargs="*",
        default=None,
        help="Queues to listen on, highest priority first (default: WORKER_QUEUE_NAMES)",
    )
    parser.add_argument("--burst", action="store_true", help="Exit once the queues are empty")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=settings.log_level, format=WORKER_LOG_FORMAT, force=True)
    queue_names = args.queues or settings.worker_queue_names
    if not queue_names:
        logger.error("No worker queues configured; set WORKER_QUEUE_NAMES or pass --queues.")
        return

    connection = Redis.from_url(settings.redis_url)
    queues = [Queue(name, connection=connection) for name in queue_names]
    worker = Worker(queues, connection=connection, name=f"seenlog-{socket.gethostname()}")
    logger.info("Starting worker %s for queues: %s", worker.name, ", ".join(queue_names))
    try:
        worker.work(burst=args.burst, with_scheduler=True)
    except KeyboardInterrupt:
        logger.info("Worker shutdown requested")


if __name__ == "__main__":
    main()
