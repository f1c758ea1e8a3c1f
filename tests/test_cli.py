"""Tests for the command-line game loop."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from shogi_online import cli


def _feed(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> None:
    it: Iterator[str] = iter(lines)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)


def test_resign_prints_kif(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _feed(monkeypatch, ["resign"])
    cli.main()
    out = capsys.readouterr().out
    assert "AI wins!" in out
    assert "   1 投了" in out
    assert "まで0手で後手の勝ち" in out


def test_invalid_input_is_reprompted(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _feed(monkeypatch, ["xx", "5e5d", "declare", "resign"])
    cli.main()
    out = capsys.readouterr().out
    assert out.count("Invalid:") == 2
    assert "Declaration conditions are not met." in out


def test_ai_replies_after_move(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _feed(monkeypatch, ["7g7f", "resign"])
    cli.main()
    out = capsys.readouterr().out
    assert "AI plays:" in out
    assert "   1 ７六歩(77)" in out


def test_eof_aborts(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _feed(monkeypatch, [])
    cli.main()
    assert "Game aborted." in capsys.readouterr().out
