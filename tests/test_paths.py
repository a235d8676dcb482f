import subprocess
import sys
from pathlib import Path
from unittest import mock

import platformdirs
import pytest

from funscriptkit import paths


def test_sanitize_string_replaces_quotes():
    assert paths.sanitize_string("it's \"x\"") == "it s  x "


def test_sanitize_string_keeps_other_text():
    assert paths.sanitize_string("plain/path.txt") == "plain/path.txt"


def test_write_then_read_round_trip(tmp_path):
    target = tmp_path / "data.bin"
    payload = bytes(range(256))
    assert paths.write_file(target, payload) == len(payload)
    assert paths.read_file(target) == payload


def test_read_file_string_round_trip(tmp_path):
    target = tmp_path / "text.txt"
    paths.write_file(target, "héllo".encode("utf-8"))
    assert paths.read_file_string(target) == "héllo"


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        paths.read_file(tmp_path / "missing.bin")


def test_file_exists(tmp_path):
    target = tmp_path / "a.txt"
    assert paths.file_exists(target) is False
    paths.write_file(target, b"x")
    assert paths.file_exists(target) is True


def test_directory_exists(tmp_path):
    file_path = tmp_path / "f.txt"
    paths.write_file(file_path, b"")
    assert paths.directory_exists(str(tmp_path)) is True
    assert paths.directory_exists(str(file_path)) is False
    assert paths.directory_exists(str(tmp_path / "nope")) is False


def test_create_directories_nested(tmp_path):
    nested = tmp_path / "a" / "b" / "c"
    result = paths.create_directories(nested)
    assert result == nested
    assert nested.is_dir()
    assert paths.create_directories(nested) == nested


def test_create_directories_over_file_raises(tmp_path):
    blocker = tmp_path / "blocker"
    paths.write_file(blocker, b"")
    with pytest.raises(OSError):
        paths.create_directories(blocker / "child")


def test_path_from_string_joins_parts():
    assert paths.path_from_string("a/b/c.txt") == Path("a", "b", "c.txt")


def test_filename_strips_last_extension():
    assert paths.filename("videos/clip.funscript") == "clip"
    assert paths.filename("archive.tar.gz") == "archive.tar"


def test_resource_under_data_dir():
    result = paths.resource("fonts/RobotoMono-Regular.ttf")
    expected = paths.base_path() / "data" / "fonts" / "RobotoMono-Regular.ttf"
    assert result == str(expected)


def test_pref_path_inside_user_dir(tmp_path, monkeypatch):
    root = tmp_path / "prefs"
    monkeypatch.setattr(platformdirs, "user_data_path", lambda *a, **k: root)
    assert paths.pref_path() == str(root)
    assert paths.pref_path("OFS.log") == str(root / "OFS.log")
    assert root.is_dir()


def test_ffmpeg_path_on_linux(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    assert paths.ffmpeg_path() == Path("ffmpeg")


def test_open_url_linux_success(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    with mock.patch.object(subprocess, "run", return_value=subprocess.CompletedProcess([], 0)) as run:
        assert paths.open_url("https://example.com") is True
    assert run.call_args.args[0] == ["xdg-open", "https://example.com"]


def test_open_url_linux_failure(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    with mock.patch.object(subprocess, "run", return_value=subprocess.CompletedProcess([], 1)):
        assert paths.open_url("https://example.com") is False


def test_open_url_macos_not_supported(monkeypatch):
    monkeypatch.setattr(sys, "platform", "darwin")
    with pytest.raises(NotImplementedError):
        paths.open_url("https://example.com")


def test_open_file_explorer_linux_uses_xdg_open(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    with mock.patch.object(subprocess, "run", return_value=subprocess.CompletedProcess([], 0)) as run:
        assert paths.open_file_explorer("/tmp/some dir") is True
    assert run.call_args.args[0] == ["xdg-open", "/tmp/some dir"]


def test_color_cycler_first_hue_step():
    cycler = paths.ColorCycler()
    cycler.next_color(0.5, 0.5)
    assert cycler.hue == pytest.approx(0.618033988749895)


def test_color_cycler_grey_packing():
    cycler = paths.ColorCycler()
    assert cycler.next_color(0.0, 1.0, 1.0) == 0xFFFFFFFF
    assert cycler.next_color(0.0, 1.0, 0.0) == 0x00FFFFFF


def test_color_cycler_is_deterministic_and_varies():
    first = paths.ColorCycler()
    second = paths.ColorCycler()
    seq1 = [first.next_color(0.8, 0.9) for _ in range(5)]
    seq2 = [second.next_color(0.8, 0.9) for _ in range(5)]
    assert seq1 == seq2
    assert len(set(seq1)) > 1
    assert all(0.0 <= c.hue < 1.0 for c in (first, second))
    assert all(color >> 24 == 0xFF for color in seq1)