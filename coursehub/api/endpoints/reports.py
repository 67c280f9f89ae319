# coursehub/api/endpoints/reports.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursehub.core.security import get_current_admin
from coursehub.db.session import get_db
from coursehub.models.user import User
from coursehub.schemas.report import ReportSummary
from coursehub.services import report_service

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/summary", response_model=ReportSummary)
def get_summary(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return report_service.build_summary(db)
