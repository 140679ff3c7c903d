from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.targets import target_from_ids
from models.domain import ActingIdentity
from repositories.database import get_db
from services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=schemas.Report, status_code=status.HTTP_201_CREATED)
def submit_report(
    report: schemas.ReportCreate,
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_acting_identity),
) -> db_models.Report:
    """Report a post or a comment for moderator review."""
    target = target_from_ids(report.post_id, report.comment_id)
    return ReportService.submit_report(db, identity, target, report.reason)


@router.get("", response_model=List[schemas.Report])
def list_reports(
    report_status: Optional[db_models.ReportStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_moderator_identity),
) -> List[db_models.Report]:
    """List reports, newest first. Moderator or admin only."""
    return ReportService.list_reports(db, identity, report_status)


@router.post("/{report_id}/close", response_model=schemas.Report)
def close_report(
    report_id: int,
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_moderator_identity),
) -> db_models.Report:
    return ReportService.close_report(db, identity, report_id)
