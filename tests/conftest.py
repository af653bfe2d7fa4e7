"""
pytest configuration and fixtures for irissort tests.
"""

import io
import json
import struct
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


def jpeg_bytes(payload: bytes = b"photo") -> bytes:
    """Minimal JPEG stream without EXIF data."""
    return b"\xff\xd8\xff\xdb\x00\x43" + payload.ljust(600, b"\x00") + b"\xff\xd9"


def exif_jpeg_bytes(date_str: str = "2021:05:06 07:08:09", payload: bytes = b"photo") -> bytes:
    """Minimal big-endian JPEG whose EXIF IFD carries DateTimeOriginal."""
    date = date_str.encode("ascii") + b"\x00"
    ifd0 = struct.pack(">H", 1) + struct.pack(">HHII", 0x8769, 4, 1, 26) + struct.pack(">I", 0)
    exif_ifd = struct.pack(">H", 1) + struct.pack(">HHII", 0x9003, 2, len(date), 44) + struct.pack(">I", 0)
    tiff = b"MM\x00\x2a" + struct.pack(">I", 8) + ifd0 + exif_ifd + date
    app1 = b"Exif\x00\x00" + tiff
    return (b"\xff\xd8\xff\xe1" + struct.pack(">H", len(app1) + 2) + app1
            + payload.ljust(600, b"\x00") + b"\xff\xd9")


def mp4_bytes(payload: bytes = b"video", major_brand: bytes = b"isom",
              compatible: bytes = b"isommp42") -> bytes:
    """Minimal ISO base media file with an ftyp box and an mdat box."""
    ftyp = b"\x00\x00\x00\x18ftyp" + major_brand + b"\x00\x00\x02\x00" + compatible
    body = payload.ljust(600, b"\x00")
    return ftyp + struct.pack(">I", len(body) + 8) + b"mdat" + body


@dataclass
class FakeFfprobe:
    """Canned ffprobe results and the commands that were run."""
    tags: Dict[str, Optional[str]]
    calls: List[List[str]]


def png_bytes(payload: bytes = b"png") -> bytes:
    return b"\x89PNG\r\n\x1a\n\x00\x00\x00\x0dIHDR" + payload.ljust(600, b"\x00")


@pytest.fixture
def media_factory(tmp_path):
    """Write media files with generated content below a root folder."""

    def write(root: Path, name: str, content: Union[bytes, str]) -> Path:
        file_path = root / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            file_path.write_text(content)
        else:
            file_path.write_bytes(content)
        return file_path

    return write


@pytest.fixture
def source_dir(tmp_path):
    source = tmp_path / "source"
    source.mkdir()
    return source


@pytest.fixture
def output_dir(tmp_path):
    output = tmp_path / "output"
    output.mkdir()
    return output


@pytest.fixture
def test_config_path(tmp_path):
    """Config path inside the test's temporary folder."""
    return tmp_path / "config" / "config.yml"


@pytest.fixture
def fake_ffprobe(monkeypatch):
    """Replace ffprobe with canned creation_time tags keyed by file name.

    A value of None produces output without tags; the string "timeout"
    simulates a hung probe.
    """
    tags_by_name: Dict[str, Optional[str]] = {}
    calls: List[List[str]] = []

    def fake_run(cmd, *args, **kwargs):
        calls.append(list(cmd))
        name = Path(cmd[-1]).name
        creation_time = tags_by_name.get(name)
        if creation_time == "timeout":
            raise subprocess.TimeoutExpired(cmd, kwargs.get("timeout"))
        tags = {"creation_time": creation_time} if creation_time else {}
        stdout = json.dumps({"format": {"filename": cmd[-1], "tags": tags}})
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")

    monkeypatch.setattr("irissort.timestamps.ffprobe_available", True)
    monkeypatch.setattr("irissort.timestamps.subprocess.run", fake_run)
    return FakeFfprobe(tags_by_name, calls)


@pytest.fixture
def cli_runner(monkeypatch):
    """Create a CLI runner that captures output and uses test config."""

    def run_cli(*args, config_path=None):
        """Run irissort CLI with given arguments.

        Returns:
            CliResult with exit_code, output, and error
        """
        from irissort.cli import main
        from irissort.constants import get_console

        # Capture stdout/stderr
        old_stdout = sys.stdout
        old_stderr = sys.stderr
        stdout = io.StringIO()
        stderr = io.StringIO()

        # Mock console.input to avoid hanging on confirmation prompts
        monkeypatch.setattr(get_console(), "input", lambda prompt="": "n", raising=False)
        monkeypatch.setattr(sys, "argv", ["irissort"] + [str(a) for a in args])

        try:
            sys.stdout = stdout
            sys.stderr = stderr
            exit_code = main(config_path=config_path)
        except SystemExit as e:
            exit_code = e.code if e.code is not None else 0
        finally:
            sys.stdout = old_stdout
            sys.stderr = old_stderr

        return CliResult(exit_code=exit_code, output=stdout.getvalue(), error=stderr.getvalue())

    return run_cli
