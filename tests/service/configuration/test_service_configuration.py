import pytest
from pydantic import PositiveInt
from pydantic_settings import SettingsConfigDict

from epub_metadata.core.exceptions import CannotLoadConfiguration
from epub_metadata.service.configuration.service_configuration import (
    ServiceConfiguration,
)


class MockServiceConfiguration(ServiceConfiguration):
    string_with_default: str = "default"
    string_without_default: str
    int_type: PositiveInt = 12

    model_config = SettingsConfigDict(env_prefix="EPUB_METADATA_TEST_")


class TestServiceConfiguration:
    @pytest.fixture(autouse=True)
    def clean_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EPUB_METADATA_TEST_STRING_WITHOUT_DEFAULT", "present")
        monkeypatch.delenv("EPUB_METADATA_TEST_STRING_WITH_DEFAULT", raising=False)
        monkeypatch.delenv("EPUB_METADATA_TEST_INT_TYPE", raising=False)

    def test_set(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("EPUB_METADATA_TEST_STRING_WITH_DEFAULT", "  spaces  ")
        monkeypatch.setenv("EPUB_METADATA_TEST_INT_TYPE", "1")

        config = MockServiceConfiguration()
        assert config.string_with_default == "spaces"
        assert config.string_without_default == "present"
        assert config.int_type == 1

    def test_defaults(self):
        config = MockServiceConfiguration()
        assert config.string_with_default == "default"
        assert config.int_type == 12

    def test_immutable(self):
        config = MockServiceConfiguration()
        with pytest.raises(ValueError):
            config.string_with_default = "new value"  # type: ignore[misc]

    def test_missing(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("EPUB_METADATA_TEST_STRING_WITHOUT_DEFAULT")
        with pytest.raises(CannotLoadConfiguration) as exc_info:
            MockServiceConfiguration()
        assert "EPUB_METADATA_TEST_STRING_WITHOUT_DEFAULT:  Field required" in str(
            exc_info.value
        )

    def test_invalid(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("EPUB_METADATA_TEST_INT_TYPE", "-12")
        with pytest.raises(CannotLoadConfiguration) as exc_info:
            MockServiceConfiguration()
        assert "EPUB_METADATA_TEST_INT_TYPE:  Input should be greater than 0" in str(
            exc_info.value
        )
