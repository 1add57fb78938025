"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.digests import DigestFeatureSettings

__all__ = [
    "DigestFeatureSettings",
]
