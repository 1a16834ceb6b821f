import os
import pytest
from pathlib import Path

from backup_audit.disposition.relocation import TrashRelocator, now_stamp
from backup_audit.exceptions import RelocationError
from conftest import FIXED_STAMP


def test_relocate_moves_file(make_file, relocator, trash_dir):
    src = make_file("backup/x.jpg", b"pixels")

    dest = relocator.relocate(src)

    assert dest == trash_dir / "x.jpg"
    assert not src.exists()
    assert dest.read_bytes() == b"pixels"


def test_collision_gets_timestamp_suffix(make_file, relocator, trash_dir):
    existing = trash_dir / "x.jpg"
    existing.write_bytes(b"old")
    src = make_file("backup/x.jpg", b"new")

    dest = relocator.relocate(src)

    assert dest.name == f"x.jpg-{FIXED_STAMP}-1"
    assert existing.read_bytes() == b"old"
    assert dest.read_bytes() == b"new"


def test_dangling_symlink_in_trash_counts_as_taken(make_file, relocator, trash_dir, tmp_path):
    outside = tmp_path / "outside.jpg"
    (trash_dir / "x.jpg").symlink_to(outside)
    src = make_file("backup/x.jpg", b"new")

    dest = relocator.relocate(src)

    assert dest == trash_dir / f"x.jpg-{FIXED_STAMP}-1"
    assert dest.read_bytes() == b"new"
    assert not outside.exists()
    assert (trash_dir / "x.jpg").is_symlink()


def test_same_name_twice_never_overwrites(make_file, relocator, trash_dir):
    first = make_file("backup/a/x.jpg", b"first")
    second = make_file("backup/b/x.jpg", b"second")
    (trash_dir / "x.jpg").write_bytes(b"zero")
    (trash_dir / f"x.jpg-{FIXED_STAMP}-1").write_bytes(b"taken")

    d1 = relocator.relocate(first)
    d2 = relocator.relocate(second)

    assert d1.name == f"x.jpg-{FIXED_STAMP}-2"
    assert d2.name == f"x.jpg-{FIXED_STAMP}-3"
    assert d1.read_bytes() == b"first"
    assert d2.read_bytes() == b"second"
    assert len(list(trash_dir.iterdir())) == 4


def test_copy_failure_keeps_original(make_file, trash_dir):
    src = make_file("backup/x.jpg", b"keep me")

    def broken_copy(s, d):
        Path(d).write_bytes(b"part")
        raise OSError("disk full")

    relocator = TrashRelocator(trash_dir, clock=lambda: FIXED_STAMP, copy=broken_copy)
    with pytest.raises(RelocationError) as exc:
        relocator.relocate(src)

    assert exc.value.stage == RelocationError.COPY
    assert src.read_bytes() == b"keep me"
    assert list(trash_dir.iterdir()) == []


def test_short_copy_is_rejected(make_file, trash_dir):
    src = make_file("backup/x.jpg", b"0123456789")
    relocator = TrashRelocator(trash_dir, copy=lambda s, d: Path(d).write_bytes(b"01234"))

    with pytest.raises(RelocationError) as exc:
        relocator.relocate(src)

    assert exc.value.stage == RelocationError.COPY
    assert src.exists()
    assert not (trash_dir / "x.jpg").exists()


def test_delete_failure_reports_stage(make_file, trash_dir):
    src = make_file("backup/x.jpg", b"both places")

    def no_delete(p):
        raise PermissionError("read-only")

    relocator = TrashRelocator(trash_dir, delete=no_delete)
    with pytest.raises(RelocationError) as exc:
        relocator.relocate(src)

    assert exc.value.stage == RelocationError.DELETE
    assert exc.value.destination == trash_dir / "x.jpg"
    assert src.exists()
    assert (trash_dir / "x.jpg").read_bytes() == b"both places"


def test_missing_source_fails_at_copy(trash_dir, tmp_path):
    relocator = TrashRelocator(trash_dir)
    with pytest.raises(RelocationError) as exc:
        relocator.relocate(tmp_path / "gone.jpg")
    assert exc.value.stage == RelocationError.COPY


def test_now_stamp_format():
    stamp = now_stamp()
    assert len(stamp) == 14
    assert stamp.isdigit()
