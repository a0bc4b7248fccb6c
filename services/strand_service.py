"""
Strand Service

Business operations for strands: oldest-first listing per thread and creation
against an existing thread.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from models import Strand, Thread, db
from .base_service import BaseService, DatabaseError, NotFoundError, ServiceResult

logger = logging.getLogger(__name__)


class StrandService(BaseService):
    """Service layer for Strand persistence."""

    def list_for_thread(self, thread_id: str) -> ServiceResult[List[Strand]]:
        """Return the strands of ``thread_id`` in the order they were written."""
        try:
            query = (
                db.select(Strand)
                .where(Strand.thread_id == thread_id)
                .order_by(Strand.created_at.asc(), Strand.id.asc())
            )
            strands = list(self.db_session.execute(query).scalars())
            return ServiceResult.success_result(strands, metadata={'count': len(strands)})
        except SQLAlchemyError as e:
            logger.error(f"Failed to list strands for thread {thread_id}: {e}")
            return ServiceResult.error_result(
                DatabaseError(str(e), error_code="STRAND_LIST_FAILED", cause=e)
            )

    def create_strand(self, data: Dict[str, Any]) -> ServiceResult[Strand]:
        """
        Persist a new strand.

        Args:
            data: Validated fields ``threadId``, ``contributorName`` and ``content``

        Returns:
            ServiceResult with the strand, or a NotFoundError when the
            referenced thread does not exist
        """
        thread_id = data['threadId']
        if self.db_session.get(Thread, thread_id) is None:
            return ServiceResult.error_result(
                NotFoundError("Thread not found", error_code="THREAD_NOT_FOUND")
            )

        strand = Strand(
            thread_id=thread_id,
            contributor_name=data['contributorName'],
            content=data['content'],
        )
        try:
            with self.transaction_scope() as session:
                session.add(strand)
        except DatabaseError as e:
            return ServiceResult.error_result(e)

        logger.info(f"Strand {strand.id} added to thread {thread_id}")
        return ServiceResult.success_result(strand)
