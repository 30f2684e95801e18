import subprocess

import pytest

import file_opener
from models import FileEntry


@pytest.mark.parametrize("platform_name, expected", [
    ("win32", ["cmd", "/C", "start", "", "/x/a.pdf"]),
    ("darwin", ["open", "/x/a.pdf"]),
    ("linux", ["xdg-open", "/x/a.pdf"]),
])
def test_open_command(platform_name, expected):
    assert file_opener.open_command("/x/a.pdf", platform_name) == expected


@pytest.fixture
def opened(monkeypatch):
    paths = []
    monkeypatch.setattr(file_opener, "open_file", paths.append)
    return paths


def test_open_entry_prefers_existing_output(tmp_path, opened):
    output = tmp_path / "a_unlocked.pdf"
    output.write_bytes(b"%PDF")
    entry = FileEntry(str(tmp_path / "a.pdf"), output_path=str(output))
    file_opener.open_entry(entry)
    assert opened == [str(output)]


def test_open_entry_falls_back_to_source(tmp_path, opened):
    entry = FileEntry(str(tmp_path / "a.pdf"), output_path=str(tmp_path / "gone.pdf"))
    file_opener.open_entry(entry)
    assert opened == [str(tmp_path / "a.pdf")]

    file_opener.open_entry(FileEntry(str(tmp_path / "b.pdf")))
    assert opened[-1] == str(tmp_path / "b.pdf")


def test_open_file_ignores_spawn_failure(monkeypatch):
    def popen(*args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(file_opener.subprocess, "Popen", popen)
    file_opener.open_file("/x/a.pdf")


def test_open_file_does_not_wait(monkeypatch):
    calls = []

    class FakePopen:
        def __init__(self, cmd, **kwargs):
            calls.append((cmd, kwargs))

        def wait(self):
            raise AssertionError("open_file must not wait for the handler")

    monkeypatch.setattr(file_opener.subprocess, "Popen", FakePopen)
    file_opener.open_file("/x/a.pdf")
    assert calls[0][0][-1] == "/x/a.pdf"
    assert calls[0][1]["stdout"] is subprocess.DEVNULL
