import pytest
from django.test import override_settings

from speaker_portal.settings import get_config


def test_get_config_defaults() -> None:
    with override_settings(SPEAKER_PORTAL={}):
        config = get_config()

    assert config.external.url is None
    assert config.external.is_configured is False
    assert config.external.timeout == 30
    assert config.uploads.max_presentation_mb == 100
    assert ".pptx" in config.uploads.presentation_extensions
    assert "KTX" in config.transportation_methods
    assert config.session_key == "speaker_portal_session"


def test_get_config_reads_external_section() -> None:
    with override_settings(
        SPEAKER_PORTAL={"external": {"url": "https://datastore.example.com", "service_key": "k", "timeout": 5}},
    ):
        config = get_config()

    assert config.external.is_configured is True
    assert config.external.timeout == 5


def test_get_config_rejects_non_mapping_root() -> None:
    with override_settings(SPEAKER_PORTAL=["bad"]):
        with pytest.raises(TypeError, match="must be a mapping"):
            get_config()


@pytest.mark.parametrize("section", ["external", "uploads", "features"])
def test_get_config_rejects_non_mapping_nested_sections(section: str) -> None:
    with override_settings(SPEAKER_PORTAL={section: ["bad"]}):
        with pytest.raises(TypeError, match=rf"SPEAKER_PORTAL\['{section}'\] must be a mapping"):
            get_config()


@pytest.mark.parametrize(
    ("raw", "match"),
    [
        ({"external": {"timeout": 0}}, "timeout"),
        ({"external": {"url": "ftp://datastore"}}, "http"),
        ({"uploads": {"max_document_mb": 0}}, "max_document_mb"),
        ({"uploads": {"max_presentation_mb": -5}}, "max_presentation_mb"),
        ({"uploads": {"presentation_extensions": ["pdf"]}}, "presentation_extensions"),
        ({"transportation_methods": []}, "transportation_methods"),
        ({"receipt_deadline_days": -1}, "receipt_deadline_days"),
        ({"session_key": " "}, "session_key"),
    ],
)
def test_get_config_validates_values(raw: dict, match: str) -> None:
    with override_settings(SPEAKER_PORTAL=raw):
        with pytest.raises(ValueError, match=match):
            get_config()


def test_get_config_normalizes_lists_to_tuples() -> None:
    with override_settings(
        SPEAKER_PORTAL={"transportation_methods": ["Bus"], "uploads": {"receipt_extensions": [".pdf"]}},
    ):
        config = get_config()

    assert config.transportation_methods == ("Bus",)
    assert config.uploads.receipt_extensions == (".pdf",)


def test_get_config_cache_clears_on_setting_changed() -> None:
    with override_settings(SPEAKER_PORTAL={"receipt_deadline_days": 5}):
        assert get_config().receipt_deadline_days == 5

    with override_settings(SPEAKER_PORTAL={"receipt_deadline_days": 10}):
        assert get_config().receipt_deadline_days == 10


def test_get_config_rejects_unknown_keys() -> None:
    with override_settings(SPEAKER_PORTAL={"unknown_section": {}}):
        with pytest.raises(TypeError):
            get_config()


def test_get_config_external_section_accepts_only_connection_keys() -> None:
    with override_settings(SPEAKER_PORTAL={"external": {"url": "https://datastore.example.com", "speaker_role": "x"}}):
        with pytest.raises(TypeError, match="speaker_role"):
            get_config()
