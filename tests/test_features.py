"""Tests for the feature toggle system."""

import pytest
from django.http import Http404, HttpRequest, HttpResponse
from django.test import override_settings
from django.views import View

from speaker_portal.features import FeatureRequiredMixin, is_feature_enabled, require_feature
from speaker_portal.settings import get_config

ALL_FEATURES = (
    "external_sync",
    "webhooks",
    "speaker_portal",
    "manage_ui",
)


# ---------------------------------------------------------------------------
# FeaturesConfig defaults
# ---------------------------------------------------------------------------


class TestFeaturesConfigDefaults:
    """All features are enabled by default."""

    def test_all_features_enabled_by_default(self) -> None:
        config = get_config().features
        for feature in ALL_FEATURES:
            assert getattr(config, f"{feature}_enabled") is True

    def test_features_config_is_frozen(self) -> None:
        config = get_config().features
        with pytest.raises(AttributeError):
            config.webhooks_enabled = False  # type: ignore[misc]


# ---------------------------------------------------------------------------
# is_feature_enabled / require_feature
# ---------------------------------------------------------------------------


class TestIsFeatureEnabled:
    """Tests for the ``is_feature_enabled`` helper."""

    @pytest.mark.parametrize("feature", ALL_FEATURES)
    def test_returns_true_by_default(self, feature: str) -> None:
        assert is_feature_enabled(feature) is True

    @pytest.mark.parametrize("feature", ALL_FEATURES)
    def test_returns_false_when_disabled(self, feature: str) -> None:
        with override_settings(SPEAKER_PORTAL={"features": {f"{feature}_enabled": False}}):
            assert is_feature_enabled(feature) is False

    def test_unknown_feature_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="Unknown feature"):
            is_feature_enabled("nonexistent_module")

    def test_unknown_feature_key_in_settings_is_rejected(self) -> None:
        with override_settings(SPEAKER_PORTAL={"features": {"bogus_enabled": False}}):
            with pytest.raises(TypeError):
                get_config()


class TestRequireFeature:
    """Tests for the ``require_feature`` guard."""

    def test_passes_when_enabled(self) -> None:
        require_feature("webhooks")

    def test_raises_404_when_disabled(self) -> None:
        with override_settings(SPEAKER_PORTAL={"features": {"webhooks_enabled": False}}):
            with pytest.raises(Http404, match="webhooks"):
                require_feature("webhooks")


# ---------------------------------------------------------------------------
# FeatureRequiredMixin
# ---------------------------------------------------------------------------


class _SingleFeatureView(FeatureRequiredMixin, View):
    required_feature = "manage_ui"

    def get(self, request: HttpRequest) -> HttpResponse:
        return HttpResponse("ok")


class _MultiFeatureView(FeatureRequiredMixin, View):
    required_feature = ("manage_ui", "external_sync")

    def get(self, request: HttpRequest) -> HttpResponse:
        return HttpResponse("ok")


class _NoFeatureView(FeatureRequiredMixin, View):
    def get(self, request: HttpRequest) -> HttpResponse:
        return HttpResponse("ok")


def _get(view_class: type[View]) -> HttpResponse:
    request = HttpRequest()
    request.method = "GET"
    return view_class.as_view()(request)


class TestFeatureRequiredMixin:
    """Tests for ``FeatureRequiredMixin``."""

    def test_allows_enabled_feature(self) -> None:
        assert _get(_SingleFeatureView).content == b"ok"

    def test_blocks_disabled_feature(self) -> None:
        with override_settings(SPEAKER_PORTAL={"features": {"manage_ui_enabled": False}}):
            with pytest.raises(Http404):
                _get(_SingleFeatureView)

    def test_requires_every_listed_feature(self) -> None:
        with override_settings(SPEAKER_PORTAL={"features": {"external_sync_enabled": False}}):
            with pytest.raises(Http404):
                _get(_MultiFeatureView)

    def test_empty_requirement_always_dispatches(self) -> None:
        with override_settings(
            SPEAKER_PORTAL={"features": {f"{feature}_enabled": False for feature in ALL_FEATURES}},
        ):
            assert _get(_NoFeatureView).content == b"ok"
