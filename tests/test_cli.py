"""Tests for the command-line interface."""

import json

from botguard.cli import main


class TestCli:
    def test_cidr_match(self, capsys):
        assert main(["cidr", "192.168.1.5", "10.0.0.0/8", "192.168.1.0/24"]) == 0
        assert "match" in capsys.readouterr().out

    def test_cidr_no_match(self, capsys):
        assert main(["cidr", "192.168.2.5", "192.168.1.0/24"]) == 1
        assert "no match" in capsys.readouterr().out

    def test_replay_json(self, tmp_path, capsys):
        path = tmp_path / "signals.jsonl"
        path.write_text(
            '{"identity": "a", "timestamp": "2026-02-20T10:00:00Z", "path": "/en-jp"}\n'
            '{"identity": "a", "timestamp": "2026-02-20T10:00:01Z", "path": "/fr-fr"}\n',
            encoding="utf-8",
        )
        assert main(["replay", str(path), "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["entries"][1]["decision"]["violations"]["locale_fanout"] is True

    def test_replay_missing_file(self, tmp_path, capsys):
        assert main(["replay", str(tmp_path / "absent.jsonl")]) == 1

    def test_state_with_memory_store(self, capsys, monkeypatch):
        monkeypatch.delenv("BG_STORAGE_BACKEND", raising=False)
        assert main(["state", "198.51.100.7"]) == 0
        assert "198.51.100.7" in capsys.readouterr().out
