"""
Base Service Layer Implementation

This module provides the Service Layer foundation for the community threads API: the service
error hierarchy, a standardized result container and a base class with Flask-SQLAlchemy session
management and transaction scoping.

Key Features:
- Constructor injection of the database session for testability
- transaction_scope() committing on success and rolling back on any failure
- ServiceResult carrying either data or a ServiceError
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Iterator, Optional, TypeVar

from flask import has_app_context
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import db

# Configure logging for service layer operations
logger = logging.getLogger(__name__)

T = TypeVar('T')


class ServiceError(Exception):
    """Base exception for service layer operations."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        """
        Initialize service error.

        Args:
            message: Human-readable error description
            error_code: Optional error code for programmatic handling
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)


class DatabaseError(ServiceError):
    """Database-specific service error for transaction and query failures."""
    pass


class NotFoundError(ServiceError):
    """Resource not found error for entity lookup failures."""
    pass


@dataclass
class ServiceResult(Generic[T]):
    """
    Standardized service operation result container.

    Exactly one of ``data`` (on success) or ``error`` (on failure) is set.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[ServiceError] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate result consistency after initialization."""
        if self.success and self.error is not None:
            raise ValueError("Successful result cannot contain error information")
        if not self.success and self.error is None:
            raise ValueError("Failed result must contain error information")

    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> 'ServiceResult[T]':
        return cls(success=True, data=data, metadata=metadata or {})

    @classmethod
    def error_result(cls, error: ServiceError, metadata: Optional[Dict[str, Any]] = None) -> 'ServiceResult[T]':
        return cls(success=False, error=error, metadata=metadata or {})


class BaseService:
    """
    Base service class providing database session management.

    Usage:
        class ThreadService(BaseService):
            def create_thread(self, data) -> ServiceResult[Thread]:
                with self.transaction_scope() as session:
                    thread = Thread(**data)
                    session.add(thread)
                return ServiceResult.success_result(thread)
    """

    def __init__(self, db_session: Optional[Session] = None) -> None:
        """
        Initialize base service with dependency injection of database session.

        Args:
            db_session: Optional database session. If None, uses the
                Flask-SQLAlchemy session from the application context.

        Raises:
            RuntimeError: If no session provided and no application context
        """
        if db_session is not None:
            self.db_session = db_session
        elif has_app_context():
            self.db_session = db.session
        else:
            raise RuntimeError(
                f"Service {self.__class__.__name__} requires database session injection "
                "or Flask application context for session access"
            )

        self._service_name = self.__class__.__name__

    @contextmanager
    def transaction_scope(self) -> Iterator[Session]:
        """
        Context manager committing on success and rolling back on failure.

        Yields:
            Database session for transaction operations

        Raises:
            DatabaseError: If the database rejects the transaction
        """
        try:
            yield self.db_session
            self.db_session.commit()
            logger.debug(f"Transaction committed for {self._service_name}")
        except SQLAlchemyError as e:
            self.db_session.rollback()
            logger.warning(f"Transaction rolled back for {self._service_name}: {e}")
            raise DatabaseError(
                f"Transaction failed: {e}",
                error_code="TRANSACTION_FAILED",
                cause=e
            )
        except Exception:
            self.db_session.rollback()
            raise
