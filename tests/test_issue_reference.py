"""Tests for issue URL parsing"""
import pytest

from worktree_manager.exceptions import ValidationError
from worktree_manager.models.issue import IssueReference, parse_issue_url


class TestParseIssueUrl:
    """Test accepted issue URL shapes."""

    def test_https_url(self):
        """Test a standard issue URL."""
        ref = parse_issue_url("https://github.com/acme/widgets/issues/42")
        assert ref.owner == "acme"
        assert ref.repo == "widgets"
        assert ref.number == 42
        assert ref.source_url == "https://github.com/acme/widgets/issues/42"

    def test_http_url(self):
        """Test that plain http is accepted."""
        ref = parse_issue_url("http://github.com/acme/widgets/issues/7")
        assert ref.number == 7

    def test_surrounding_whitespace_is_stripped(self):
        """Test that pasted URLs with whitespace still parse."""
        ref = parse_issue_url("  https://github.com/acme/widgets/issues/3\n")
        assert ref.source_url == "https://github.com/acme/widgets/issues/3"

    def test_names_with_dots_and_dashes(self):
        """Test owner and repo names using allowed punctuation."""
        ref = parse_issue_url("https://github.com/my-org/my.repo_name/issues/100")
        assert ref.owner == "my-org"
        assert ref.repo == "my.repo_name"

    def test_string_forms(self):
        """Test full_name, path and str()."""
        ref = parse_issue_url("https://github.com/acme/widgets/issues/42")
        assert ref.full_name == "acme/widgets"
        assert ref.path == "acme/widgets/issues/42"
        assert str(ref) == "acme/widgets#42"

    def test_path_rebuilds_the_url(self):
        """Test that owner, repo and number reconstruct the original URL path."""
        for url in [
            "https://github.com/acme/widgets/issues/1",
            "https://github.com/my-org/my.repo_name/issues/1090",
        ]:
            ref = parse_issue_url(url)
            assert url.endswith("/" + ref.path)
            assert ref.path == url.split("github.com/", 1)[1]

    def test_reference_is_immutable(self):
        """Test that references cannot be modified after parsing."""
        ref = parse_issue_url("https://github.com/acme/widgets/issues/42")
        with pytest.raises(Exception):
            ref.number = 43


class TestParseIssueUrlRejects:
    """Test rejected issue URL shapes."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://gitlab.com/acme/widgets/issues/42",
            "https://github.com/acme/widgets/pull/42",
            "https://github.com/acme/widgets/issues/",
            "https://github.com/acme/widgets/issues/abc",
            "https://github.com/acme/issues/42",
            "https://github.com/acme/widgets/issues/42/comments",
            "https://github.com/acme/widgets/issues/42?x=1",
            "github.com/acme/widgets/issues/42",
            "https://github.com/acme/widgets/issues/\u0664\u0662",
            "https://github.com/acme/widgets/issues/042",
            "https://github.com/acme/widgets/issues/00",
            "not a url",
            "",
        ],
    )
    def test_invalid_urls(self, url):
        """Test that anything but a full issue URL raises ValidationError."""
        with pytest.raises(ValidationError):
            parse_issue_url(url)

    def test_issue_number_zero(self):
        """Test that issue numbers must be positive."""
        with pytest.raises(ValidationError):
            parse_issue_url("https://github.com/acme/widgets/issues/0")

    def test_dot_segments(self):
        """Test that '.' and '..' are not repository names."""
        with pytest.raises(ValidationError):
            parse_issue_url("https://github.com/acme/../issues/1")

    def test_error_carries_value(self):
        """Test that the rejected value is kept on the error."""
        with pytest.raises(ValidationError) as exc_info:
            parse_issue_url("https://gitlab.com/acme/widgets/issues/42")
        assert exc_info.value.value == "https://gitlab.com/acme/widgets/issues/42"


class TestIssueReference:
    def test_equality(self):
        """Test value equality of references."""
        a = IssueReference("acme", "widgets", 1, "https://github.com/acme/widgets/issues/1")
        b = parse_issue_url("https://github.com/acme/widgets/issues/1")
        assert a == b
