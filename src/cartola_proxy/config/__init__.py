"""Configuration helpers for upstream routes and runtime settings."""

from .settings import ProxySettings, UpstreamRoutes

__all__ = [
    "ProxySettings",
    "UpstreamRoutes",
]
