"""
Flask Blueprint Package Initialization

This module provides centralized blueprint registration for the application factory. Each
blueprint is described by a BlueprintConfig entry and imported lazily, then registered in
priority order under its URL prefix.

Blueprint Organization:
- health_bp: liveness and readiness probes
- threads_bp: story thread endpoints under /api/threads
- strands_bp: strand endpoints under /api/strands
"""

import logging
from dataclasses import dataclass
from importlib import import_module
from typing import Any, Dict, List, Optional

from flask import Blueprint, Flask

# Configure logging for blueprint registration operations
logger = logging.getLogger(__name__)


@dataclass
class BlueprintConfig:
    """
    Configuration class for blueprint registration metadata.
    """
    name: str
    module_path: str
    blueprint_name: str
    url_prefix: Optional[str] = None
    enabled: bool = True
    priority: int = 0
    description: str = ""


class BlueprintRegistrationError(Exception):
    """Custom exception for blueprint registration failures."""

    def __init__(self, message: str, blueprint_name: str = None, error_code: str = None):
        super().__init__(message)
        self.message = message
        self.blueprint_name = blueprint_name
        self.error_code = error_code or 'BLUEPRINT_REGISTRATION_ERROR'


DEFAULT_BLUEPRINTS = (
    BlueprintConfig(
        name='health',
        module_path='blueprints.health',
        blueprint_name='health_bp',
        url_prefix='/health',
        priority=1,
        description='Liveness and readiness endpoints'
    ),
    BlueprintConfig(
        name='threads',
        module_path='blueprints.threads',
        blueprint_name='threads_bp',
        url_prefix='/api/threads',
        priority=2,
        description='Story thread endpoints'
    ),
    BlueprintConfig(
        name='strands',
        module_path='blueprints.strands',
        blueprint_name='strands_bp',
        url_prefix='/api/strands',
        priority=3,
        description='Strand endpoints'
    ),
)


class BlueprintRegistry:
    """
    Centralized blueprint registry for lazy loading and registration.
    """

    def __init__(self, configs=DEFAULT_BLUEPRINTS):
        self._blueprints: Dict[str, BlueprintConfig] = {config.name: config for config in configs}
        self._registration_order: List[str] = []

    def discover_blueprints(self) -> List[str]:
        """Return enabled blueprint names in registration order."""
        enabled = [config for config in self._blueprints.values() if config.enabled]
        return [config.name for config in sorted(enabled, key=lambda config: config.priority)]

    def load_blueprint(self, blueprint_name: str) -> Blueprint:
        """
        Import a blueprint module and return its blueprint object.

        Raises:
            BlueprintRegistrationError: If the module or object cannot be resolved
        """
        config = self._blueprints.get(blueprint_name)
        if config is None:
            raise BlueprintRegistrationError(
                f"Unknown blueprint: {blueprint_name}",
                blueprint_name=blueprint_name
            )

        module = import_module(config.module_path)
        blueprint = getattr(module, config.blueprint_name, None)
        if not isinstance(blueprint, Blueprint):
            raise BlueprintRegistrationError(
                f"Object '{config.blueprint_name}' in '{config.module_path}' is not a Flask Blueprint",
                blueprint_name=blueprint_name
            )
        return blueprint

    def register_all(self, app: Flask) -> Dict[str, Any]:
        """Load and register every enabled blueprint on ``app``."""
        for name in self.discover_blueprints():
            config = self._blueprints[name]
            blueprint = self.load_blueprint(name)
            options = {}
            if config.url_prefix is not None:
                options['url_prefix'] = config.url_prefix
            app.register_blueprint(blueprint, **options)
            self._registration_order.append(name)
            logger.debug(f"Registered blueprint '{name}' at {config.url_prefix}")

        return self.get_registration_status()

    def get_registration_status(self) -> Dict[str, Any]:
        return {
            'registered': list(self._registration_order),
            'total': len(self._registration_order),
        }


def register_all_blueprints(app: Flask) -> Dict[str, Any]:
    """
    Register all application blueprints.

    Args:
        app: Flask application instance

    Returns:
        Registration status summary
    """
    registry = BlueprintRegistry()
    status = registry.register_all(app)
    app.extensions['blueprint_registry'] = registry
    logger.info(f"Registered {status['total']} blueprints: {status['registered']}")
    return status


__all__ = [
    'BlueprintConfig',
    'BlueprintRegistrationError',
    'BlueprintRegistry',
    'register_all_blueprints',
]
