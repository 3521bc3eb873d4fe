"""Tests for relpack.output.console module."""

from __future__ import annotations

import pytest

from relpack.output.console import MockConsole, RichConsole, Style


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.outputs[0].message == "hello"
        assert console.outputs[0].style == Style.DEFAULT

    def test_prefixes(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("broken")
        console.warning("careful")
        console.info("fyi")
        assert console.messages == ["OK done", "error: broken", "warning: careful", "info: fyi"]

    def test_helpers(self) -> None:
        console = MockConsole()
        console.print("[Add File] LICENSE -> LICENSE", Style.DIM)
        console.warning("old timestamp")
        assert console.has_warning()
        assert not console.has_error()
        assert len(console.find("[Add File]")) == 1
        assert console.count(Style.DIM) == 1

    def test_clear(self) -> None:
        console = MockConsole()
        console.newline()
        console.clear()
        assert console.outputs == []


class TestRichConsole:
    def test_brackets_print_verbatim(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.print("[Add File] LICENSE -> LICENSE", Style.DIM)
        assert "[Add File] LICENSE -> LICENSE" in capsys.readouterr().out

    def test_error_escapes_message(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.error("bad entry [bold]")
        out = capsys.readouterr().out
        assert "error:" in out
        assert "[bold]" in out
