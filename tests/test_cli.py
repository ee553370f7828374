"""
Tests for the command-line interface
"""

import json
import pytest

from chatbond.cli import analyze_file, main


@pytest.fixture(autouse=True)
def in_process(monkeypatch):
    monkeypatch.setattr("chatbond.config.USE_WORKER", False)
    monkeypatch.setattr("chatbond.config.USE_ENRICHMENT", False)


@pytest.fixture
def chat_file(tmp_path, scenario_text):
    path = tmp_path / "chat.txt"
    path.write_text(scenario_text, encoding="utf-8")
    return path


def test_analyze_writes_report(chat_file, tmp_path):
    out = tmp_path / "report.json"
    main(["analyze", str(chat_file), "-o", str(out)])

    report = json.loads(out.read_text(encoding="utf-8"))
    assert report["metadata"]["total_messages"] == 120
    assert report["gamification"]["compatibility"]["tier"] == "Good Match"


def test_analyze_file_prints_without_output(chat_file, capsys):
    report = analyze_file(str(chat_file))

    printed = json.loads(capsys.readouterr().out)
    assert printed["metadata"]["participants"] == report["metadata"]["participants"]


def test_analyze_bad_file_exits(tmp_path):
    bad = tmp_path / "notes.txt"
    bad.write_text("just notes\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main(["analyze", str(bad)])
    assert exc.value.code == 1


def test_validate(chat_file, tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["validate", str(chat_file)])
    assert exc.value.code == 0

    bad = tmp_path / "notes.txt"
    bad.write_text("just notes\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["validate", str(bad)])
    assert exc.value.code == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
