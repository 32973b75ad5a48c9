"""Wire a SessionController from settings."""

import httpx

from carechat.auth.models import Credentials
from carechat.auth.store import KeyValueStore
from carechat.auth.stores import create_key_value_store
from carechat.auth.token_store import TokenStore
from carechat.client.client import CareChatClient
from carechat.config.settings import Settings
from carechat.observability.logging import get_logger, setup_logging
from carechat.session.controller import SessionController

logger = get_logger(__name__)


def build_controller(
    settings: Settings,
    *,
    storage: KeyValueStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    configure_logging: bool = True,
) -> SessionController:
    """Build a controller with its token store and client.

    Args:
        settings: Loaded settings
        storage: Key-value backend; built from settings.storage when omitted
        transport: httpx transport override for the client
        configure_logging: Whether to apply settings.observability.logging

    Returns:
        A controller that still needs `restore()` to pick up a saved token
    """
    if configure_logging:
        log_config = settings.observability.logging
        setup_logging(
            level=log_config.level,
            format=log_config.format,
            redact_pii=log_config.redact_pii,
        )

    token_store = TokenStore(
        storage or create_key_value_store(settings.storage),
        key=settings.auth.token_key,
    )
    client = CareChatClient.from_config(settings.service, transport=transport)

    service = settings.service
    prefill = None
    if service.default_username and service.default_password:
        prefill = Credentials(
            username=service.default_username,
            password=service.default_password,
        )

    logger.debug(
        "controller_built",
        base_url=service.base_url,
        storage_backend=settings.storage.backend,
    )
    return SessionController(
        client,
        token_store,
        staged_delay_seconds=settings.session.staged_delay_seconds,
        prefill=prefill,
    )
