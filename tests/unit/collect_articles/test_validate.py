"""Tests for collect_articles.validate module."""

import pytest

from collect_articles.exceptions import ValidationError
from collect_articles.validate import validate_range, validate_request, validate_url


class TestValidateUrl:
    def test_author_url(self) -> None:
        assert validate_url("https://brunch.co.kr/@alice") == ("alice", "https://brunch.co.kr/@alice")

    def test_article_url_is_reduced_to_author(self) -> None:
        assert validate_url("https://brunch.co.kr/@alice_01/42") == (
            "alice_01",
            "https://brunch.co.kr/@alice_01",
        )

    def test_surrounding_whitespace_ignored(self) -> None:
        author_id, _ = validate_url("  https://brunch.co.kr/@bob-k  ")
        assert author_id == "bob-k"

    @pytest.mark.parametrize("url", ["", "   ", None])
    def test_empty(self, url) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_url(url)
        assert exc_info.value.errors == ["브런치 URL을 입력해주세요."]

    @pytest.mark.parametrize(
        "url",
        [
            "http://brunch.co.kr/@alice",
            "https://example.com/@alice",
            "https://brunch.co.kr/alice",
            "https://brunch.co.kr/@alice/abc",
            "https://brunch.co.kr/@al ice",
        ],
    )
    def test_bad_format(self, url) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_url(url)
        assert exc_info.value.errors[0].startswith("올바른 브런치 URL 형식이 아닙니다.")


class TestValidateRange:
    def test_valid_range(self) -> None:
        assert validate_range(1, 50) == []

    def test_single_article(self) -> None:
        assert validate_range(7, 7) == []

    def test_non_positive_start(self) -> None:
        assert validate_range(0, 5) == ["시작 번호는 1 이상의 정수여야 합니다."]

    def test_both_bounds_invalid(self) -> None:
        errors = validate_range(-1, "x")
        assert errors == [
            "시작 번호는 1 이상의 정수여야 합니다.",
            "종료 번호는 1 이상의 정수여야 합니다.",
        ]

    def test_bool_is_not_a_number(self) -> None:
        assert validate_range(True, 3) == ["시작 번호는 1 이상의 정수여야 합니다."]

    def test_end_before_start(self) -> None:
        assert validate_range(5, 4) == ["종료 번호는 시작 번호보다 크거나 같아야 합니다."]

    def test_too_many_articles(self) -> None:
        assert validate_range(1, 51) == ["한 번에 최대 50개의 글만 수집할 수 있습니다."]

    def test_custom_limit(self) -> None:
        assert validate_range(1, 11, max_articles=10) == ["한 번에 최대 10개의 글만 수집할 수 있습니다."]

    def test_upper_bound(self) -> None:
        assert validate_range(1, 1_000_000) == ["종료 번호는 999999 이하여야 합니다."]


class TestValidateRequest:
    def test_builds_request(self) -> None:
        request, author_id = validate_request("https://brunch.co.kr/@alice/3", 1, 3, preserve_formatting=True)
        assert author_id == "alice"
        assert request.base_url == "https://brunch.co.kr/@alice"
        assert list(request.numbers) == [1, 2, 3]
        assert request.total == 3
        assert request.preserve_formatting is True

    def test_collects_url_and_range_errors(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_request("not a url", 3, 1)
        errors = exc_info.value.errors
        assert len(errors) == 2
        assert errors[0].startswith("올바른 브런치 URL 형식이 아닙니다.")
        assert errors[1] == "종료 번호는 시작 번호보다 크거나 같아야 합니다."
        assert str(exc_info.value) == "; ".join(errors)
