"""
Notification tasks for the rq worker.

Runs the document/email part of the enrollment workflow outside the request.
"""

import asyncio
import logging

from coursehub.db.session import SessionLocal
from coursehub.services import enrollment_service
from coursehub.services.enrollment_workflow import deliver_enrollment_documents

logger = logging.getLogger(__name__)


def enrollment_notification_task(enrollment_id: int) -> dict:
    """
    Render and email the acceptance letter and invoice for one enrollment.

    Failures are re-raised so rq records the job as failed and applies the
    queue's retry policy.
    """
    db = SessionLocal()
    try:
        logger.info(f"Starting notification task for enrollment {enrollment_id}")
        enrollment = enrollment_service.get_enrollment(db, enrollment_id)
        if enrollment is None:
            logger.warning(f"Enrollment {enrollment_id} no longer exists, nothing to send")
            return {"status": "skipped", "enrollment_id": enrollment_id}

        sent = asyncio.run(deliver_enrollment_documents(enrollment))
        logger.info(f"Completed notification task for enrollment {enrollment_id}: sent={sent}")
        return {"status": "success", "enrollment_id": enrollment_id, "sent": sent}

    except Exception as e:
        logger.error(
            f"Notification task failed for enrollment {enrollment_id}: {e}",
            exc_info=True,
        )
        raise

    finally:
        db.close()
