# coursehub/workers/queue.py

from typing import Any, Callable

from redis import Redis
from rq import Queue, Retry

from coursehub.core.config import settings

_DEFAULT_QUEUE_NAME = "default"
NOTIFICATIONS_QUEUE_NAME = "notifications"

_redis_conn: Redis | None = None


def get_redis_connection() -> Redis:
    global _redis_conn
    if _redis_conn is None:
        _redis_conn = Redis.from_url(settings.REDIS_URL)
    return _redis_conn


def get_queue(name: str = _DEFAULT_QUEUE_NAME) -> Queue:
    return Queue(name, connection=get_redis_connection())


def enqueue_job(
    func: Callable[..., Any],
    *args: Any,
    queue_name: str = _DEFAULT_QUEUE_NAME,
    **kwargs: Any,
) -> str:
    q = get_queue(queue_name)
    job = q.enqueue(func, *args, **kwargs)
    return job.id


def enqueue_enrollment_notification(enrollment_id: int) -> str:
    from coursehub.workers.tasks import enrollment_notification_task

    return enqueue_job(
        enrollment_notification_task,
        enrollment_id,
        queue_name=NOTIFICATIONS_QUEUE_NAME,
        retry=Retry(max=settings.NOTIFICATION_MAX_RETRIES),
    )
