"""
Report repository for database operations.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from .base import BaseRepository


class ReportRepository(BaseRepository[db_models.Report]):
    """Repository for Report entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Report, db)

    def get_all_reports(
        self, status: Optional[db_models.ReportStatus] = None
    ) -> List[db_models.Report]:
        """
        Get reports, newest first.

        Args:
            status: Optional status filter

        Returns:
            List of reports with reporter loaded
        """
        query = self.db.query(db_models.Report).options(
            joinedload(db_models.Report.reporter)
        )
        if status is not None:
            query = query.filter(db_models.Report.status == status)
        return query.order_by(
            db_models.Report.created_at.desc(), db_models.Report.id.desc()
        ).all()

    def delete_for_post(self, post_id: int) -> int:
        """Delete reports filed against a post (no commit)."""
        return (
            self.db.query(db_models.Report)
            .filter(db_models.Report.post_id == post_id)
            .delete(synchronize_session=False)
        )

    def delete_for_comments(self, comment_ids: List[int]) -> int:
        """Delete reports filed against any of the given comments (no commit)."""
        if not comment_ids:
            return 0
        return (
            self.db.query(db_models.Report)
            .filter(db_models.Report.comment_id.in_(comment_ids))
            .delete(synchronize_session=False)
        )

    def close_if_open(self, report_id: int, actor_id: int, now: datetime) -> int:
        """
        Close a report only if it is still open (no commit).

        Returns:
            Number of rows updated (0 when missing or already closed)
        """
        return (
            self.db.query(db_models.Report)
            .filter(
                db_models.Report.id == report_id,
                db_models.Report.status == db_models.ReportStatus.OPEN,
            )
            .update(
                {
                    db_models.Report.status: db_models.ReportStatus.CLOSED,
                    db_models.Report.closed_at: now,
                    db_models.Report.closed_by: actor_id,
                },
                synchronize_session=False,
            )
        )
