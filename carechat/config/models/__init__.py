"""Configuration model exports.

    from carechat.config.models import ServiceConfig, StorageConfig
"""

from carechat.config.models.auth import AuthConfig
from carechat.config.models.observability import LoggingConfig, ObservabilityConfig
from carechat.config.models.service import ServiceConfig
from carechat.config.models.session import SessionConfig
from carechat.config.models.storage import StorageConfig

__all__ = [
    "AuthConfig",
    "LoggingConfig",
    "ObservabilityConfig",
    "ServiceConfig",
    "SessionConfig",
    "StorageConfig",
]
