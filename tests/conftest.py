import pytest
from pathlib import Path

from backup_audit.disposition.prompts import Prompter
from backup_audit.disposition.relocation import TrashRelocator
from backup_audit.exceptions import InvalidInputError

FIXED_STAMP = "20260101120000"


class ScriptedPrompter(Prompter):
    """Answers prompts from a fixed list; running out behaves like closed stdin."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise InvalidInputError("script exhausted")
        return self.answers.pop(0)


@pytest.fixture
def make_file(tmp_path):
    """Creates a file (and its parents) under tmp_path with the given bytes."""
    def _make(rel: str, data: bytes = b"data") -> Path:
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
        return p
    return _make


@pytest.fixture
def trash_dir(tmp_path):
    d = tmp_path / "Trash"
    d.mkdir()
    return d


@pytest.fixture
def relocator(trash_dir):
    return TrashRelocator(trash_dir, clock=lambda: FIXED_STAMP)


@pytest.fixture
def scripted():
    return ScriptedPrompter
