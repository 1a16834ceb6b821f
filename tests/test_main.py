import csv
import io
import sys
import pytest
from pathlib import Path

from backup_audit import config, main as cli
from backup_audit.core import BackupAuditApp
from conftest import FIXED_STAMP, ScriptedPrompter
from backup_audit.disposition.relocation import TrashRelocator
from backup_audit.disposition.workflow import DispositionWorkflow


@pytest.fixture
def env(monkeypatch, tmp_path):
    backup = tmp_path / "backup"
    library = tmp_path / "library"
    (library / "upload").mkdir(parents=True)
    backup.mkdir()
    monkeypatch.setenv(config.ENV_BACKUP_DIR, str(backup))
    monkeypatch.setenv(config.ENV_LIBRARY_DIR, str(library))
    monkeypatch.setenv(config.ENV_LOG_DIR, str(tmp_path / "logs"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    return backup, library


def test_parse_args():
    args = cli.parse_args(["-v", "--backup-dir", "/b", "compare", "--report-csv", "out.csv"])
    assert args.verbose
    assert args.command == "compare"
    assert args.backup_dir == Path("/b")
    assert args.report_csv == Path("out.csv")


def test_parse_args_requires_command():
    with pytest.raises(SystemExit):
        cli.parse_args([])


def test_load_skip_dirs(tmp_path):
    skip_file = tmp_path / "skips.txt"
    skip_file.write_text("# comment\n\n/data/a\n  /data/b  \n", encoding="utf-8")

    assert cli.load_skip_dirs(skip_file) == {Path("/data/a"), Path("/data/b")}
    assert cli.load_skip_dirs(tmp_path / "missing.txt") == set()
    assert cli.load_skip_dirs(None) == set()


def test_compare_command_writes_report(env, tmp_path):
    backup, library = env
    (backup / "a.jpg").write_bytes(b"a")
    (backup / "b.jpg").write_bytes(b"b")
    (library / "upload" / "copy_of_b.jpg").write_bytes(b"b")

    report = tmp_path / "missing.csv"
    rc = cli.main(["--no-progress", "compare", "--report-csv", str(report)])

    assert rc == 0
    with open(report, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert [Path(r[0]).name for r in rows[1:]] == ["a.jpg"]
    assert (tmp_path / "logs").is_dir()


def test_missing_config_exits_2(env, monkeypatch):
    monkeypatch.delenv(config.ENV_LIBRARY_DIR)
    assert cli.main(["--no-progress", "compare"]) == 2


def test_missing_library_tree_exits_3(env, tmp_path):
    assert cli.main(["--no-progress", "--library-dir", str(tmp_path / "nope"), "compare"]) == 3


def test_sync_closed_stdin_exits_1(env, monkeypatch):
    backup, _ = env
    (backup / "a.jpg").write_bytes(b"a")
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    assert cli.main(["--no-progress", "sync"]) == 1
    assert (backup / "a.jpg").exists()


@pytest.mark.skipif(sys.platform == "darwin", reason="macOS uses ~/.Trash")
def test_sync_keeps_and_trashes(env, monkeypatch, tmp_path):
    backup, _ = env
    (backup / "a.jpg").write_bytes(b"a")
    (backup / "b.jpg").write_bytes(b"b")
    monkeypatch.setattr("sys.stdin", io.StringIO("n\nt\nk\n"))

    assert cli.main(["--no-progress", "sync"]) == 0
    assert not (backup / "a.jpg").exists()
    assert (tmp_path / "data" / "Trash" / "files" / "a.jpg").exists()
    assert (backup / "b.jpg").exists()


def test_check_paths(env, monkeypatch, tmp_path, capsys):
    monkeypatch.delenv(config.ENV_EXPORT_DIR, raising=False)
    assert cli.main(["check-paths"]) == 3
    out = capsys.readouterr().out
    assert "APPLE_PHOTOS_EXPORT_DIR not set" in out

    export = tmp_path / "export"
    export.mkdir()
    monkeypatch.setenv(config.ENV_EXPORT_DIR, str(export))
    assert cli.main(["check-paths"]) == 0


def test_app_sync_prefilter(env, tmp_path, trash_dir):
    backup, library = env
    (backup / "a.jpg").write_bytes(b"a")
    (backup / "clip.mov").write_bytes(b"m")

    app = BackupAuditApp(backup, library / "upload", show_progress=False)
    prompter = ScriptedPrompter(["y", "2", "t"])
    workflow = DispositionWorkflow(prompter, TrashRelocator(trash_dir, clock=lambda: FIXED_STAMP))

    summary = app.sync(prompter, trash_dir, workflow=workflow)

    assert summary.total == 1
    assert summary.trashed == 1
    assert (backup / "a.jpg").exists()
    assert (trash_dir / "clip.mov").exists()


def test_app_sync_nothing_missing(env, trash_dir):
    backup, library = env
    (backup / "a.jpg").write_bytes(b"a")
    (library / "upload" / "a.jpg").write_bytes(b"a")

    app = BackupAuditApp(backup, library / "upload", show_progress=False)
    prompter = ScriptedPrompter([])
    assert app.sync(prompter, trash_dir) is None
    assert prompter.prompts == []


def test_app_sync_filter_matches_nothing(env, trash_dir):
    backup, library = env
    (backup / "a.jpg").write_bytes(b"a")

    app = BackupAuditApp(backup, library / "upload", show_progress=False)
    prompter = ScriptedPrompter(["y", "3", "zzz"])
    assert app.sync(prompter, trash_dir) is None
