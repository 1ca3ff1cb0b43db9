from __future__ import annotations

import json
from pathlib import Path

import pytest

from deskview.cli import deskctl
from deskview.core.submissions import SubmissionStore


def _run(argv) -> int:
    with pytest.raises(SystemExit) as excinfo:
        deskctl.main(argv)
    return excinfo.value.code


def test_check_reports_slug_collisions(tmp_path: Path, make_desk, capsys):
    desks = tmp_path / "desks.json"
    desks.write_text(json.dumps([make_desk(1, "Sam Lee"), make_desk(2, "Sam Lee"), make_desk(3, "Ana")]), encoding="utf-8")

    code = _run(["--config", str(tmp_path / "config.yaml"), "check", "--desks", str(desks)])

    out = capsys.readouterr().out
    assert code == 1
    assert "3 desks" in out
    assert "'sam-lee'" in out


def test_check_clean_file(tmp_path: Path, desk_dicts, capsys):
    desks = tmp_path / "desks.json"
    desks.write_text(json.dumps(desk_dicts), encoding="utf-8")

    assert _run(["--config", str(tmp_path / "config.yaml"), "check", "--desks", str(desks)]) == 0


def test_approve_and_export(tmp_path: Path, capsys):
    submissions = tmp_path / "submissions.json"
    store = SubmissionStore(submissions)
    row = store.submit(
        {"name": "Radia Perlman", "title": "Engineer", "location": "Seattle", "profileImageUrl": "/p.jpg"}
    )
    base = ["--config", str(tmp_path / "config.yaml"), "--submissions", str(submissions)]

    assert _run(base + ["pending"]) == 0
    assert "Radia Perlman" in capsys.readouterr().out

    assert _run(base + ["approve", str(row["id"])]) == 0
    output = tmp_path / "out" / "desks.json"
    assert _run(base + ["export", "--output", str(output)]) == 0

    exported = json.loads(output.read_text(encoding="utf-8"))
    assert [desk["slug"] for desk in exported] == ["radia-perlman"]
    assert store.notifications("unread") == []
