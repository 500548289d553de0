"""Unit tests for utility functions (blueprint.utils).

Tests cover:
- run_command (success, failure, timeout, env vars, missing binary)
- format_duration
- Rich output helpers and the Reporter
"""

from __future__ import annotations

import io
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from blueprint.utils import (
    Reporter,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command(["echo", "hello"])
        assert returncode == 0
        assert stdout == "hello"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failing_command(self):
        returncode, _, stderr = await run_command(["sh", "-c", "echo oops >&2; exit 3"])
        assert returncode == 3
        assert "oops" in stderr

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self):
        returncode, _, stderr = await run_command(["sleep", "5"], timeout=1)
        assert returncode == -1
        assert "timed out" in stderr

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_env_vars(self):
        returncode, stdout, _ = await run_command(
            ["sh", "-c", "echo $BLUEPRINT_TEST_VAR"], env={"BLUEPRINT_TEST_VAR": "value"}
        )
        assert returncode == 0
        assert stdout == "value"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cwd(self, tmp_path):
        returncode, stdout, _ = await run_command(["pwd"], cwd=tmp_path)
        assert returncode == 0
        assert stdout.endswith(tmp_path.name)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_binary_raises(self):
        with pytest.raises(FileNotFoundError):
            await run_command(["definitely-not-a-real-binary-xyz"])


# ---------------------------------------------------------------------------
# format_duration
# ---------------------------------------------------------------------------


class TestFormatDuration:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (-1, "0ms"),
            (0.25, "250ms"),
            (3.7, "3.7s"),
            (65.2, "1m 5s"),
        ],
    )
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    @pytest.mark.unit
    def test_print_summary_table_to_target(self):
        buffer = io.StringIO()
        target = Console(file=buffer, width=120)
        print_summary_table({"Files": "3"}, title="Result", target=target)
        output = buffer.getvalue()
        assert "Result" in output
        assert "Files" in output

    @pytest.mark.unit
    def test_print_helpers_use_module_console(self):
        with patch("blueprint.utils.console") as mock_console:
            print_success("ok")
            print_error("bad")
            print_warning("careful")
        assert mock_console.print.call_count == 3
        printed = [c.args[0] for c in mock_console.print.call_args_list]
        assert "ok" in printed[0]
        assert "bad" in printed[1]
        assert "careful" in printed[2]


class TestReporter:
    @pytest.mark.unit
    def test_debug_only_when_verbose(self):
        quiet = MagicMock()
        Reporter(target=quiet, verbose=False).debug("hidden")
        quiet.print.assert_not_called()

        loud = MagicMock()
        Reporter(target=loud, verbose=True).debug("shown")
        loud.print.assert_called_once()

    @pytest.mark.unit
    def test_warning_and_error_prefixes(self, reporter, console_buffer):
        reporter.warning("disk almost full")
        reporter.error("disk full")
        output = console_buffer.getvalue()
        assert "WARNING: disk almost full" in output
        assert "ERROR: disk full" in output

    @pytest.mark.unit
    def test_summary_renders_table(self, reporter, console_buffer):
        reporter.summary({"Target": "/tmp/x"}, title="Generation Summary")
        assert "Generation Summary" in console_buffer.getvalue()

    @pytest.mark.unit
    def test_bracketed_text_is_printed_literally(self, reporter, console_buffer):
        text = "/tmp/we[/ird]/proj [bold]x"
        reporter.info(text)
        reporter.success(text)
        reporter.warning(text)
        reporter.error(text)
        reporter.debug(text)
        reporter.summary({"Target [/x]": text}, title="Generation Summary")

        output = console_buffer.getvalue()
        assert output.count(text) == 6
        assert "Target [/x]" in output

    @pytest.mark.unit
    def test_print_helpers_escape_markup(self):
        buffer = io.StringIO()
        with patch("blueprint.utils.console", Console(file=buffer, width=200)):
            print_success("created at a[/b]")
            print_error("failed at a[/b]")
            print_warning("skipped a[/b]")
        output = buffer.getvalue()
        assert output.count("a[/b]") == 3
