import subprocess
from pathlib import Path

import pytest


class FakeTranscoder:
    """Stands in for subprocess.run: records commands and writes the output file."""

    def __init__(self, returncode=0, stderr=""):
        self.returncode = returncode
        self.stderr = stderr
        self.calls = []

    def __call__(self, command, **kwargs):
        self.calls.append(list(command))
        if self.returncode == 0:
            Path(command[-1]).write_text("converted")
        return subprocess.CompletedProcess(command, self.returncode, stdout="", stderr=self.stderr)


@pytest.fixture
def install_ffmpeg(monkeypatch):
    def install(returncode=0, stderr=""):
        fake = FakeTranscoder(returncode, stderr)
        monkeypatch.setattr("transcode_cli.transcoder.subprocess.run", fake)
        return fake

    return install


@pytest.fixture
def fake_ffmpeg(install_ffmpeg):
    return install_ffmpeg()


@pytest.fixture
def failing_ffmpeg(install_ffmpeg):
    return install_ffmpeg(returncode=1, stderr="codec error\n")
