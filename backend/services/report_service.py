"""
Report service for content moderation.

Any signed-in user can report a post or comment. Moderators and admins review
open reports and close them; a closed report is never reopened.
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from helpers.time_utils import utc_now
from models.domain import ActingIdentity, PostTarget, Target
from models.exceptions import (
    CommentNotFoundException,
    PermissionDeniedException,
    PostNotFoundException,
    ReportAlreadyClosedException,
    ReportNotFoundException,
    StorageException,
    ValidationException,
)
from repositories.comment_repository import CommentRepository
from repositories.post_repository import PostRepository
from repositories.report_repository import ReportRepository

REASON_MAX_LENGTH = 1000


def _require_moderator(actor: ActingIdentity) -> None:
    if not actor.is_moderator:
        raise PermissionDeniedException("Moderator or admin role required")


class ReportService:
    """Service for report submission and review."""

    @staticmethod
    def submit_report(
        db: Session, actor: ActingIdentity, target: Target, reason: str
    ) -> db_models.Report:
        """
        File an open report against a post or comment.

        Raises:
            ValidationException: Empty or overlong reason
            PostNotFoundException: Post target does not exist
            CommentNotFoundException: Comment target does not exist
        """
        reason = reason.strip()
        if not reason:
            raise ValidationException("Report reason is required")
        if len(reason) > REASON_MAX_LENGTH:
            raise ValidationException(
                f"Report reason must be at most {REASON_MAX_LENGTH} characters"
            )

        if isinstance(target, PostTarget):
            if PostRepository(db).get_by_id(target.id) is None:
                raise PostNotFoundException(target.id)
            report = db_models.Report(
                reporter_id=actor.id, post_id=target.id, reason=reason
            )
        else:
            if CommentRepository(db).get_by_id(target.id) is None:
                raise CommentNotFoundException(target.id)
            report = db_models.Report(
                reporter_id=actor.id, comment_id=target.id, reason=reason
            )

        report = ReportRepository(db).create(report)
        logger.info(f"Report {report.id} filed by user {actor.id} on {target}")
        return report

    @staticmethod
    def list_reports(
        db: Session,
        actor: ActingIdentity,
        status: Optional[db_models.ReportStatus] = None,
    ) -> List[db_models.Report]:
        """
        List reports for review, newest first.

        Raises:
            PermissionDeniedException: Actor is not a moderator or admin
        """
        _require_moderator(actor)
        return ReportRepository(db).get_all_reports(status)

    @staticmethod
    def close_report(
        db: Session, actor: ActingIdentity, report_id: int
    ) -> db_models.Report:
        """
        Close an open report.

        Raises:
            PermissionDeniedException: Actor is not a moderator or admin
            ReportNotFoundException: No such report
            ReportAlreadyClosedException: Report was already closed, including
                by a concurrent close
            StorageException: Database failure
        """
        _require_moderator(actor)
        report_repo = ReportRepository(db)
        report = report_repo.get_by_id(report_id)
        if report is None:
            raise ReportNotFoundException(report_id)
        if report.status == db_models.ReportStatus.CLOSED:
            raise ReportAlreadyClosedException(report_id)

        # Only a row still open is updated
        try:
            closed = report_repo.close_if_open(report_id, actor.id, utc_now())
            if closed == 0:
                report_repo.rollback()
                if report_repo.get_by_id(report_id) is None:
                    raise ReportNotFoundException(report_id)
                raise ReportAlreadyClosedException(report_id)
            report_repo.commit()
        except SQLAlchemyError as e:
            report_repo.rollback()
            logger.error(f"Closing report {report_id} failed: {e}")
            raise StorageException()

        report_repo.refresh(report)
        logger.info(f"Report {report_id} closed by user {actor.id}")
        return report
