"""Tests for core error hierarchy."""

import pytest

from bmadflow.core.errors import (
    BmadError,
    ConfigError,
    DocumentParseError,
    NotFoundError,
)


class TestErrorHierarchy:
    def test_base_error_is_exception(self) -> None:
        assert issubclass(BmadError, Exception)

    def test_not_found_is_bmad_error(self) -> None:
        assert issubclass(NotFoundError, BmadError)

    def test_document_parse_is_bmad_error(self) -> None:
        assert issubclass(DocumentParseError, BmadError)

    def test_config_is_bmad_error(self) -> None:
        assert issubclass(ConfigError, BmadError)


class TestErrorRaising:
    def test_raise_not_found(self) -> None:
        with pytest.raises(NotFoundError, match="Agent not found"):
            raise NotFoundError("Agent not found: po")

    def test_caught_as_base(self) -> None:
        with pytest.raises(BmadError):
            raise DocumentParseError("bad yaml")
