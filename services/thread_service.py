"""
Thread Service

Business operations for story threads: newest-first listing, lookup by id and
creation from already validated, sanitized input.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from models import Thread, db
from .base_service import BaseService, DatabaseError, NotFoundError, ServiceResult

logger = logging.getLogger(__name__)


class ThreadService(BaseService):
    """Service layer for Thread persistence."""

    def list_threads(self) -> ServiceResult[List[Thread]]:
        """Return all threads, most recently created first."""
        try:
            query = db.select(Thread).order_by(Thread.created_at.desc(), Thread.id.desc())
            threads = list(self.db_session.execute(query).scalars())
            return ServiceResult.success_result(threads, metadata={'count': len(threads)})
        except SQLAlchemyError as e:
            logger.error(f"Failed to list threads: {e}")
            return ServiceResult.error_result(
                DatabaseError(str(e), error_code="THREAD_LIST_FAILED", cause=e)
            )

    def get_thread(self, thread_id: str) -> ServiceResult[Thread]:
        """
        Look up a single thread.

        Args:
            thread_id: 24 character document identifier

        Returns:
            ServiceResult with the thread, or a NotFoundError
        """
        try:
            thread = self.db_session.get(Thread, thread_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load thread {thread_id}: {e}")
            return ServiceResult.error_result(
                DatabaseError(str(e), error_code="THREAD_LOOKUP_FAILED", cause=e)
            )

        if thread is None:
            return ServiceResult.error_result(
                NotFoundError("Thread not found", error_code="THREAD_NOT_FOUND")
            )
        return ServiceResult.success_result(thread)

    def create_thread(self, data: Dict[str, Any]) -> ServiceResult[Thread]:
        """
        Persist a new thread.

        Args:
            data: Validated fields ``title``, ``description`` and optional ``tags``
        """
        thread = Thread(
            title=data['title'],
            description=data['description'],
            tags=list(data.get('tags') or []),
        )
        try:
            with self.transaction_scope() as session:
                session.add(thread)
        except DatabaseError as e:
            return ServiceResult.error_result(e)

        logger.info(f"Thread created: {thread.id}")
        return ServiceResult.success_result(thread)
