# coursehub/api/endpoints/enrollments.py
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.core.exceptions import NotFoundError
from coursehub.core.security import get_current_admin
from coursehub.db.session import get_db
from coursehub.models.user import User
from coursehub.schemas.auth import MessageResponse
from coursehub.schemas.enrollment import (
    EnrollmentCreate,
    EnrollmentCreated,
    EnrollmentDetail,
    EnrollmentStatusUpdate,
    EnrollmentStatusUpdated,
)
from coursehub.services import enrollment_service
from coursehub.services.enrollment_workflow import CREATED_MESSAGES, create_enrollment_and_notify

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


def _get_or_404(db: Session, enrollment_id: int):
    enrollment = enrollment_service.get_enrollment(db, enrollment_id)
    if not enrollment:
        raise NotFoundError("Enrollment not found")
    return enrollment


@router.post("/", response_model=EnrollmentCreated, status_code=status.HTTP_201_CREATED)
async def create_enrollment(obj_in: EnrollmentCreate, db: Session = Depends(get_db)):
    """
    公开报名接口：写库 -> 生成录取信和发票 PDF -> 邮件发送 -> 删除临时文件。
    """
    enrollment, email_outcome = await create_enrollment_and_notify(db, obj_in=obj_in)
    return EnrollmentCreated(
        message=CREATED_MESSAGES[email_outcome],
        enrollment=EnrollmentDetail.model_validate(enrollment),
    )


@router.get("/", response_model=List[EnrollmentDetail])
def list_enrollments(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
    search: Optional[str] = None,
    status: Optional[str] = None,
):
    return enrollment_service.list_enrollments(db, search=search, status=status)


@router.get("/schedule/{schedule_id}", response_model=List[EnrollmentDetail])
def list_enrollments_for_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return enrollment_service.list_enrollments_for_schedule(db, schedule_id)


@router.get("/{enrollment_id}", response_model=EnrollmentDetail)
def get_enrollment(enrollment_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, enrollment_id)


@router.patch("/{enrollment_id}/status", response_model=EnrollmentStatusUpdated)
def update_enrollment_status(
    enrollment_id: int,
    obj_in: EnrollmentStatusUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    enrollment = _get_or_404(db, enrollment_id)
    enrollment = enrollment_service.update_status(db, db_obj=enrollment, status=obj_in.status)
    return EnrollmentStatusUpdated(
        message="Enrollment status updated successfully",
        enrollment=EnrollmentDetail.model_validate(enrollment),
    )


@router.delete("/{enrollment_id}", response_model=MessageResponse)
def delete_enrollment(
    enrollment_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    enrollment = _get_or_404(db, enrollment_id)
    enrollment_service.delete_enrollment(db, db_obj=enrollment)
    return MessageResponse(message="Enrollment deleted successfully")
