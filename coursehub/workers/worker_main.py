# coursehub/workers/worker_main.py
"""
rq worker for enrollment notifications.

    python -m coursehub.workers.worker_main           # run until stopped
    python -m coursehub.workers.worker_main --burst   # drain the queue and exit
"""

import logging
import sys

from rq import SimpleWorker

from coursehub.core.logging_config import setup_logging
from coursehub.workers.queue import NOTIFICATIONS_QUEUE_NAME, get_queue, get_redis_connection

logger = logging.getLogger(__name__)

LISTEN_QUEUES = [NOTIFICATIONS_QUEUE_NAME]


def build_worker() -> SimpleWorker:
    # SimpleWorker runs jobs in-process, so the SQLAlchemy engine is not forked
    queues = [get_queue(name) for name in LISTEN_QUEUES]
    return SimpleWorker(queues, connection=get_redis_connection())


def main(argv: list[str] | None = None) -> bool:
    setup_logging()
    burst = "--burst" in (sys.argv[1:] if argv is None else argv)

    worker = build_worker()
    logger.info(f"Worker listening on {', '.join(LISTEN_QUEUES)} (burst={burst})")
    return worker.work(burst=burst)


if __name__ == "__main__":
    main()
