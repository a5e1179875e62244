"""Tests for error types and codes."""

import pytest

from craprs.core.errors import (
    ConfigError,
    CoverageReportMissing,
    CoverageToolFailure,
    CrapError,
    ErrorCode,
    MalformedCoverageReport,
    ManifestNotFound,
    ParseFailure,
    SourceNotFound,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.SOURCE_NOT_FOUND, 3000),
            (ErrorCode.PARSE_FAILURE, 3000),
            (ErrorCode.MANIFEST_NOT_FOUND, 3000),
            (ErrorCode.COVERAGE_TOOL_FAILURE, 7000),
            (ErrorCode.COVERAGE_REPORT_MISSING, 7000),
            (ErrorCode.MALFORMED_COVERAGE_REPORT, 7000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestCrapError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = CrapError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_includes_code_and_name(self) -> None:
        """String form carries numeric code, name and message."""
        # Given
        error = SourceNotFound.at("/crate/src")

        # When
        text = str(error)

        # Then
        assert text == "[3001] SOURCE_NOT_FOUND: Source directory not found: /crate/src"

    def test_given_error_when_raised_then_catchable_as_base(self) -> None:
        """Every error type is a CrapError."""
        with pytest.raises(CrapError):
            raise MalformedCoverageReport.unreadable("lcov.info", "permission denied")


class TestErrorFactories:
    """Factory classmethods build consistent messages and details."""

    def test_config_errors(self) -> None:
        parse = ConfigError.parse_error("/p/.craprs.yaml", "bad indent")
        invalid = ConfigError.invalid_value("coverage.tool", "grcov", "unknown tool")
        assert parse.code == ErrorCode.CONFIG_PARSE_ERROR
        assert "/p/.craprs.yaml" in parse.message
        assert invalid.code == ErrorCode.CONFIG_INVALID_VALUE
        assert invalid.details["field"] == "coverage.tool"

    def test_parse_failure_with_line(self) -> None:
        error = ParseFailure.in_file("src/broken.rs", "1 syntax error(s)", line=3)
        assert error.message == "Failed to parse src/broken.rs:3: 1 syntax error(s)"
        assert error.details["line"] == 3

    def test_parse_failure_without_line(self) -> None:
        error = ParseFailure.in_file("src/broken.rs", "permission denied")
        assert error.message == "Failed to parse src/broken.rs: permission denied"

    def test_parse_failure_whole_tree(self) -> None:
        failures = [
            ParseFailure.in_file("src/lib.rs", "1 syntax error(s)", line=1),
            ParseFailure.in_file("src/main.rs", "permission denied"),
        ]
        error = ParseFailure.whole_tree("/work/crate/src", failures)
        assert error.code == ErrorCode.PARSE_FAILURE
        assert error.details["paths"] == ["src/lib.rs", "src/main.rs"]
        assert error.message == "No source file under /work/crate/src could be parsed (2 failed)"


    def test_manifest_not_found_suggestion(self) -> None:
        plain = ManifestNotFound.at("/work/crate/src")
        hinted = ManifestNotFound.at("/work/crate/src", "/work/crate")
        assert "did you mean" not in plain.message
        assert hinted.message.endswith("(did you mean /work/crate?)")

    def test_coverage_tool_failure_variants(self) -> None:
        cmd = ["cargo", "tarpaulin"]
        exited = CoverageToolFailure.exited(cmd, 101, "boom")
        missing = CoverageToolFailure.not_started(cmd, "not found")
        slow = CoverageToolFailure.timed_out(cmd, 60)
        assert {exited.code, missing.code, slow.code} == {ErrorCode.COVERAGE_TOOL_FAILURE}
        assert "exit 101" in exited.message
        assert exited.details["stderr"] == "boom"
        assert "cargo tarpaulin" in missing.message
        assert "60s" in slow.message

    def test_report_missing_hint_depends_on_skip(self) -> None:
        skipped = CoverageReportMissing.at("lcov.info", skipped=True)
        generated = CoverageReportMissing.at("lcov.info", skipped=False)
        assert "--skip-coverage" in skipped.message
        assert "--skip-coverage" not in generated.message

    def test_malformed_report_at_line(self) -> None:
        error = MalformedCoverageReport.at_line("lcov.info", 7, "DA:x", "expected DA:<line>,<hits>")
        assert "lcov.info:7" in error.message
        assert error.details == {
            "path": "lcov.info",
            "line": 7,
            "text": "DA:x",
            "reason": "expected DA:<line>,<hits>",
        }
