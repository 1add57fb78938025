"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the digest
engine using Pydantic BaseSettings with domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    DigestFeatureSettings: Digest feature settings class (for testing)

Example:
    ```python
    from infrastructure.configuration import settings

    send_empty = settings.digests.send_empty_digests
    workers = settings.digests.max_workers
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.features import DigestFeatureSettings

__all__ = ["Settings", "settings", "DigestFeatureSettings"]
