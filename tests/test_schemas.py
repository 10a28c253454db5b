"""Tests for bookmark request schemas."""

import pytest
from pydantic import ValidationError

from app.interfaces.bookmarks.schemas import (
    TITLE_MAX_LEN,
    URL_MAX_LEN,
    BookmarkIdParams,
    CreateBookmarkRequest,
)


class TestCreateBookmarkRequest:
    def test_whitespace_is_stripped(self) -> None:
        payload = CreateBookmarkRequest.model_validate(
            {"title": "  Docs  ", "url": " https://example.com/docs "}
        )
        assert payload.title == "Docs"
        assert payload.url == "https://example.com/docs"

    def test_unknown_fields_ignored(self) -> None:
        payload = CreateBookmarkRequest.model_validate(
            {"title": "Docs", "url": "https://example.com", "user_id": "someone-else"}
        )
        assert not hasattr(payload, "user_id")

    @pytest.mark.parametrize(
        "url",
        ["example.com", "ftp://example.com/file", "javascript:alert(1)", "https://", "   "],
    )
    def test_rejects_non_http_urls(self, url: str) -> None:
        with pytest.raises(ValidationError):
            CreateBookmarkRequest.model_validate({"title": "Docs", "url": url})

    def test_blank_title_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateBookmarkRequest.model_validate({"title": "   ", "url": "https://example.com"})

    def test_length_limits(self) -> None:
        CreateBookmarkRequest.model_validate(
            {"title": "t" * TITLE_MAX_LEN, "url": "https://example.com/"}
        )
        with pytest.raises(ValidationError):
            CreateBookmarkRequest.model_validate(
                {"title": "t" * (TITLE_MAX_LEN + 1), "url": "https://example.com/"}
            )

        base = "https://example.com/"
        with pytest.raises(ValidationError):
            CreateBookmarkRequest.model_validate(
                {"title": "Docs", "url": base + "a" * (URL_MAX_LEN - len(base) + 1)}
            )

    def test_missing_fields(self) -> None:
        with pytest.raises(ValidationError) as info:
            CreateBookmarkRequest.model_validate({})
        assert {e["loc"][0] for e in info.value.errors()} == {"title", "url"}


class TestBookmarkIdParams:
    def test_accepts_uuid(self) -> None:
        params = BookmarkIdParams.model_validate({"id": "0b7f8f4e-1d0a-4b8e-9c55-2f1f0d3c6a11"})
        assert str(params.id) == "0b7f8f4e-1d0a-4b8e-9c55-2f1f0d3c6a11"

    def test_rejects_non_uuid(self) -> None:
        with pytest.raises(ValidationError):
            BookmarkIdParams.model_validate({"id": "42"})
