"""
Service Package Initialization Module

This module provides centralized service registration and lookup for the community threads
API. Blueprints obtain services through the registry instead of constructing them directly,
so tests can substitute sessions or whole services.

Key Features:
- Service registry bound to the Flask application factory
- Per-request caching of service instances in ``flask.g``
- ``with_service`` decorator injecting a service into a route handler
"""

import logging
from functools import wraps
from typing import Callable, Dict, Optional, Type

from flask import Flask, current_app, g

from .base_service import BaseService, DatabaseError, NotFoundError, ServiceError, ServiceResult
from .strand_service import StrandService
from .thread_service import ThreadService

logger = logging.getLogger(__name__)


class ServiceRegistryError(ServiceError):
    """Raised when a service is requested that was never registered."""
    pass


class FlaskServiceRegistry:
    """
    Service registry implementation for Flask application factory pattern.

    Attributes:
        app: Flask application instance
        service_classes: Mapping of service names to service classes
    """

    def __init__(self, app: Optional[Flask] = None) -> None:
        self.app = app
        self.service_classes: Dict[str, Type[BaseService]] = {}
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Register core services and attach the registry to ``app``."""
        self.app = app
        self.register_service('thread', ThreadService)
        self.register_service('strand', StrandService)
        app.extensions['service_registry'] = self
        app.teardown_request(self._cleanup_services)
        logger.debug(f"Service registry initialized with {sorted(self.service_classes)}")

    def register_service(self, service_name: str, service_class: Type[BaseService]) -> None:
        self.service_classes[service_name] = service_class

    def get_service(self, service_name: str) -> BaseService:
        """
        Retrieve a service instance, cached for the current request.

        Raises:
            ServiceRegistryError: If ``service_name`` is not registered
        """
        if service_name not in self.service_classes:
            raise ServiceRegistryError(
                f"Service '{service_name}' not registered",
                error_code='SERVICE_NOT_FOUND'
            )

        if 'services' not in g:
            g.services = {}
        if service_name not in g.services:
            g.services[service_name] = self.service_classes[service_name]()
        return g.services[service_name]

    def _cleanup_services(self, exception: Optional[BaseException] = None) -> None:
        services = g.pop('services', None)
        if services:
            logger.debug(f"Released services: {sorted(services)}")


def get_service(service_name: str) -> BaseService:
    """
    Get a service instance from the application's registry.

    Example:
        thread_service = get_service('thread')
        result = thread_service.list_threads()
    """
    return current_app.extensions['service_registry'].get_service(service_name)


def with_service(service_name: str):
    """
    Decorator injecting ``<service_name>_service`` into a route handler.

    Example:
        @threads_bp.route('/<id>')
        @with_service('thread')
        def get_thread(id, thread_service):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            kwargs[f"{service_name}_service"] = get_service(service_name)
            return func(*args, **kwargs)
        return wrapper
    return decorator


def init_services(app: Flask) -> FlaskServiceRegistry:
    """Initialize the service layer for ``app``."""
    return FlaskServiceRegistry(app)


__all__ = [
    'BaseService',
    'DatabaseError',
    'NotFoundError',
    'ServiceError',
    'ServiceResult',
    'ServiceRegistryError',
    'FlaskServiceRegistry',
    'ThreadService',
    'StrandService',
    'get_service',
    'with_service',
    'init_services',
]
