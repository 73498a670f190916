from pathlib import Path

from transcode_cli.paths import compute_output_path, current_dir, display_path


def test_display_relative_to_start_dir(tmp_path):
    target = tmp_path / "music" / "a.mp3"
    assert display_path(target, tmp_path) == Path("music/a.mp3")


def test_display_relative_input_is_kept_relative(tmp_path):
    assert display_path(Path("./music/a.mp3"), tmp_path) == Path("music/a.mp3")


def test_display_outside_start_dir_uses_parent_steps(tmp_path):
    start = tmp_path / "here"
    start.mkdir()
    assert display_path(tmp_path / "there" / "a.mp3", start) == Path("../there/a.mp3")


def test_display_falls_back_to_canonical_path(tmp_path):
    f = tmp_path / "a.mp3"
    f.write_text("x")
    assert display_path(f, None) == f.resolve()


def test_display_falls_back_to_raw_path(tmp_path):
    missing = tmp_path / "missing.mp3"
    assert display_path(missing, None) == missing


def test_output_path_is_sibling_with_new_extension():
    assert compute_output_path(Path("dir/a.mp3"), "opus") == Path("dir/a.opus")
    assert compute_output_path(Path("dir/a.b.mp3"), "opus") == Path("dir/a.b.opus")


def test_current_dir(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    assert current_dir() == tmp_path
