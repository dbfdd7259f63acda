"""Typed configuration for django-speaker-portal.

Reads a single ``SPEAKER_PORTAL`` dict from Django settings and exposes it as
composed, frozen dataclasses with sensible defaults.

Usage::

    from speaker_portal.settings import get_config

    config = get_config()
    config.external.url
    config.uploads.max_document_mb
    config.transportation_methods
"""

import functools
from collections.abc import Mapping
from dataclasses import dataclass, field

from django.conf import settings
from django.test.signals import setting_changed


@dataclass(frozen=True, slots=True)
class ExternalConfig:
    """Connection settings for the external project/speaker datastore."""

    url: str | None = None
    service_key: str | None = None
    timeout: int = 30
    webhook_secret: str | None = None

    @property
    def is_configured(self) -> bool:
        """Return ``True`` when both the URL and the service key are set."""
        return bool(self.url and self.service_key)


@dataclass(frozen=True, slots=True)
class UploadConfig:
    """Size and extension limits for speaker uploads."""

    max_document_mb: int = 10
    max_presentation_mb: int = 100
    document_extensions: tuple[str, ...] = (".jpg", ".jpeg", ".png", ".pdf")
    presentation_extensions: tuple[str, ...] = (".ppt", ".pptx", ".pdf")
    receipt_extensions: tuple[str, ...] = (".jpg", ".jpeg", ".png", ".pdf")


@dataclass(frozen=True, slots=True)
class FeaturesConfig:
    """Feature toggles for enabling/disabling portal surfaces.

    All features are enabled by default. Set to ``False`` in
    ``SPEAKER_PORTAL['features']`` to disable.
    """

    external_sync_enabled: bool = True
    webhooks_enabled: bool = True
    speaker_portal_enabled: bool = True
    manage_ui_enabled: bool = True


@dataclass(frozen=True, slots=True)
class PortalConfig:
    """Top-level django-speaker-portal configuration."""

    external: ExternalConfig = field(default_factory=ExternalConfig)
    uploads: UploadConfig = field(default_factory=UploadConfig)
    features: FeaturesConfig = field(default_factory=FeaturesConfig)
    transportation_methods: tuple[str, ...] = ("대중교통", "자차", "KTX", "항공", "기타")
    receipt_deadline_days: int = 3
    session_key: str = "speaker_portal_session"


def _section(raw_data: dict[str, object], key: str) -> dict[str, object]:
    """Pop a nested section from the raw settings dict, checking its type."""
    data = raw_data.pop(key, {})
    if not isinstance(data, Mapping):
        msg = f"SPEAKER_PORTAL['{key}'] must be a mapping (dict-like object)"
        raise TypeError(msg)
    return dict(data)


def _as_tuple(data: dict[str, object], key: str) -> None:
    """Normalize list values to tuples so the frozen config stays hashable."""
    if isinstance(data.get(key), list):
        data[key] = tuple(data[key])


@functools.lru_cache(maxsize=1)
def get_config() -> PortalConfig:
    """Build and return the portal configuration.

    Reads ``settings.SPEAKER_PORTAL`` (a plain dict) and returns a frozen
    :class:`PortalConfig`.  The result is cached; the cache is cleared
    automatically when Django's ``setting_changed`` signal fires (e.g. inside
    ``override_settings``).
    """
    raw = getattr(settings, "SPEAKER_PORTAL", {})
    if not isinstance(raw, Mapping):
        msg = "SPEAKER_PORTAL must be a mapping (dict-like object)"
        raise TypeError(msg)
    raw_data = dict(raw)

    external_data = _section(raw_data, "external")
    uploads_data = _section(raw_data, "uploads")
    features_data = _section(raw_data, "features")
    for key in ("document_extensions", "presentation_extensions", "receipt_extensions"):
        _as_tuple(uploads_data, key)
    _as_tuple(raw_data, "transportation_methods")

    config = PortalConfig(
        external=ExternalConfig(**external_data),
        uploads=UploadConfig(**uploads_data),
        features=FeaturesConfig(**features_data),
        **raw_data,
    )
    _validate_portal_config(config)
    return config


def _validate_portal_config(config: PortalConfig) -> None:
    """Validate high-impact configuration values with clear error messages."""
    if not isinstance(config.external.timeout, int) or config.external.timeout <= 0:
        msg = "SPEAKER_PORTAL['external']['timeout'] must be a positive integer"
        raise ValueError(msg)
    if config.external.url is not None and not str(config.external.url).startswith(("http://", "https://")):
        msg = "SPEAKER_PORTAL['external']['url'] must be an http(s) URL"
        raise ValueError(msg)
    for name in ("max_document_mb", "max_presentation_mb"):
        value = getattr(config.uploads, name)
        if not isinstance(value, int) or value <= 0:
            msg = f"SPEAKER_PORTAL['uploads']['{name}'] must be a positive integer"
            raise ValueError(msg)
    for name in ("document_extensions", "presentation_extensions", "receipt_extensions"):
        extensions = getattr(config.uploads, name)
        if not all(isinstance(ext, str) and ext.startswith(".") for ext in extensions):
            msg = f"SPEAKER_PORTAL['uploads']['{name}'] must contain extensions starting with '.'"
            raise ValueError(msg)
    if not config.transportation_methods:
        msg = "SPEAKER_PORTAL['transportation_methods'] must be a non-empty list"
        raise ValueError(msg)
    if not isinstance(config.receipt_deadline_days, int) or config.receipt_deadline_days < 0:
        msg = "SPEAKER_PORTAL['receipt_deadline_days'] must be a non-negative integer"
        raise ValueError(msg)
    if not isinstance(config.session_key, str) or not config.session_key.strip():
        msg = "SPEAKER_PORTAL['session_key'] must be a non-empty string"
        raise ValueError(msg)


def _clear_config_cache(*, setting: str, **kwargs: object) -> None:  # noqa: ARG001
    """Clear the cached config when Django settings change during tests."""
    if setting == "SPEAKER_PORTAL":
        get_config.cache_clear()


setting_changed.connect(_clear_config_cache, dispatch_uid="speaker_portal.settings.clear_config_cache")
