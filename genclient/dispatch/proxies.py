"""Proxy server selection for generation endpoints."""

from __future__ import annotations

import logging

from genclient.core.config import Settings, settings as default_settings
from genclient.schemas.session import SessionContext

logger = logging.getLogger(__name__)


def _proxy_url(session: SessionContext, fallback: str, kind: str, config: Settings) -> str:
    if session.selected_proxy_server:
        logger.info("Using user-selected %s proxy: %s", kind, session.selected_proxy_server)
        return session.selected_proxy_server
    url = fallback if config.is_production else ""
    logger.info("No user-selected %s proxy found, using fallback: %r", kind, url)
    return url


def get_veo_proxy_url(session: SessionContext, config: Settings | None = None) -> str:
    config = config or default_settings
    return _proxy_url(session, config.veo_fallback_url, "VEO", config)


def get_imagen_proxy_url(session: SessionContext, config: Settings | None = None) -> str:
    config = config or default_settings
    return _proxy_url(session, config.imagen_fallback_url, "Imagen", config)


def resolve_server_url(endpoint: str, session: SessionContext, config: Settings | None = None) -> str:
    """Return the server that owns ``endpoint``: Imagen if it prefixes the endpoint, else VEO."""
    imagen_url = get_imagen_proxy_url(session, config)
    if endpoint.startswith(imagen_url):
        return imagen_url
    return get_veo_proxy_url(session, config)
