import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from database import get_db
from middleware.rate_limit import limiter
from models.user import User
from schemas.analysis_report import AnalysisReportOut
from services.analytics.errors import InvalidInput
from services.report_service import create_report, list_reports
from services.supabase_auth import get_current_db_user

logger = logging.getLogger(__name__)
router = APIRouter(tags=["suggestions"])


@router.get("/reports", response_model=List[AnalysisReportOut])
def get_reports(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_db_user),
):
    return list_reports(db, user.id)


@router.post("/reports", response_model=AnalysisReportOut, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
async def generate_report(
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_db_user),
):
    try:
        return await create_report(db, user.id)
    except InvalidInput as exc:
        logger.warning("analysis_report_invalid_input field=%s", exc.field)
        raise HTTPException(status_code=422, detail=str(exc))
