# coursehub/services/enrollment_workflow.py
"""
Enrollment confirmation: persist, render the two PDFs, email them, clean up.

The steps run strictly in order. A failure after the row is written is reported
as "Error creating enrollment" but the row is kept; the response carries its id
so it can be reconciled.
"""

import asyncio
import logging
import time
from pathlib import Path

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from coursehub.core.config import settings
from coursehub.core.exceptions import AppError
from coursehub.models.enrollment import Enrollment
from coursehub.schemas.enrollment import EnrollmentCreate
from coursehub.services import documents, enrollment_service
from coursehub.services.email_service import email_service

logger = logging.getLogger(__name__)

NOTIFY_INLINE = "inline"
NOTIFY_QUEUE = "queue"

EMAIL_SENT = "sent"
EMAIL_SKIPPED = "skipped"
EMAIL_QUEUED = "queued"

CREATED_MESSAGES = {
    EMAIL_SENT: "Enrollment created successfully and confirmation email sent",
    EMAIL_SKIPPED: "Enrollment created successfully; confirmation email could not be sent",
    EMAIL_QUEUED: "Enrollment created successfully; confirmation email will follow shortly",
}


def document_paths(enrollment_id: int) -> tuple[Path, Path]:
    pdf_dir = Path(settings.PDF_DIR)
    pdf_dir.mkdir(parents=True, exist_ok=True)
    stamp = int(time.time() * 1000)
    return (
        pdf_dir / f"acceptance_{enrollment_id}_{stamp}.pdf",
        pdf_dir / f"invoice_{enrollment_id}_{stamp}.pdf",
    )


def _remove(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
        logger.info(f"Removed temporary file {path}")
    except OSError as e:
        logger.warning(f"Could not remove temporary file {path}: {e}")


async def deliver_enrollment_documents(enrollment: Enrollment) -> bool:
    """
    Render the acceptance letter and invoice, email them, then delete both
    files whatever happened. ``enrollment`` must have its schedule and
    training loaded.
    """
    acceptance_path, invoice_path = document_paths(enrollment.id)
    loop = asyncio.get_running_loop()
    try:
        # reportlab is blocking
        await loop.run_in_executor(
            None, documents.render_acceptance_letter, enrollment, str(acceptance_path)
        )
        await loop.run_in_executor(None, documents.render_invoice, enrollment, str(invoice_path))
        return await email_service.send_enrollment_confirmation(
            enrollment, str(acceptance_path), str(invoice_path)
        )
    finally:
        _remove(acceptance_path)
        _remove(invoice_path)


def _enqueue(enrollment_id: int) -> str:
    from coursehub.workers.queue import enqueue_enrollment_notification

    return enqueue_enrollment_notification(enrollment_id)


async def create_enrollment_and_notify(
    db: Session, *, obj_in: EnrollmentCreate
) -> tuple[Enrollment, str]:
    """
    Returns the loaded enrollment and one of ``EMAIL_SENT``, ``EMAIL_SKIPPED``
    or ``EMAIL_QUEUED``. Database calls run in the threadpool.
    """
    enrollment = await run_in_threadpool(enrollment_service.create_enrollment, db, obj_in=obj_in)
    enrollment_id = enrollment.id

    try:
        enrollment = await run_in_threadpool(enrollment_service.get_enrollment, db, enrollment_id)
        if settings.ENROLLMENT_NOTIFY_MODE == NOTIFY_QUEUE:
            job_id = await run_in_threadpool(_enqueue, enrollment_id)
            logger.info(f"Queued notification job {job_id} for enrollment {enrollment_id}")
            return enrollment, EMAIL_QUEUED

        sent = await deliver_enrollment_documents(enrollment)
        return enrollment, EMAIL_SENT if sent else EMAIL_SKIPPED
    except Exception as e:
        logger.error(f"Enrollment {enrollment_id} saved but notification failed: {e}", exc_info=True)
        raise AppError(
            "Error creating enrollment",
            extra={"error": str(e), "enrollment_id": enrollment_id},
        ) from e
