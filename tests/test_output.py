from pathlib import Path

import pytest

import ideo.output as output_module
from ideo.errors import FetchError, WriteError
from ideo.output import ImageOutcome, OutputSpec, RunReport, write_all, write_image


def test_default_single_path():
    spec = OutputSpec(template=None, timestamp=1700000000)
    assert spec.path_for(1, 1) == Path("ideo_1700000000.png")


def test_default_multi_paths():
    spec = OutputSpec(template=None, timestamp=1700000000)
    assert spec.paths(3) == [
        Path("ideo_1700000000_1.png"),
        Path("ideo_1700000000_2.png"),
        Path("ideo_1700000000_3.png"),
    ]


def test_template_used_verbatim_for_single_image():
    spec = OutputSpec(template=Path("renders/cat.jpg"), timestamp=1)
    assert spec.path_for(1, 1) == Path("renders/cat.jpg")


@pytest.mark.parametrize(
    "template,expected",
    [
        ("out.png", ["out_1.png", "out_2.png", "out_3.png"]),
        ("out", ["out_1", "out_2", "out_3"]),
        ("a/b.tar.gz", ["a/b.tar_1.gz", "a/b.tar_2.gz", "a/b.tar_3.gz"]),
    ],
)
def test_template_suffixing(template, expected):
    spec = OutputSpec(template=Path(template), timestamp=1)
    assert spec.paths(3) == [Path(item) for item in expected]


@pytest.mark.parametrize("total", [2, 9, 10, 11, 150])
def test_paths_are_distinct_and_stable(total):
    for template in (None, Path("x/out.png")):
        spec = OutputSpec(template=template, timestamp=5)
        paths = spec.paths(total)
        assert len(set(paths)) == total
        assert paths == spec.paths(total)


@pytest.mark.parametrize("index,total", [(0, 1), (2, 1), (1, 0)])
def test_index_out_of_range(index, total):
    with pytest.raises(ValueError):
        OutputSpec(template=None, timestamp=1).path_for(index, total)


def test_write_image_creates_parents_and_writes_verbatim(tmp_path):
    target = tmp_path / "deep" / "nested" / "img.png"
    data = bytes(range(256))
    assert write_image(1, target, data) == target
    assert target.read_bytes() == data
    assert not (target.parent / "img.png.part").exists()


def test_write_image_failure_raises_and_cleans_up(tmp_path, monkeypatch):
    target = tmp_path / "img.png"

    def broken_replace(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(output_module.os, "replace", broken_replace)
    with pytest.raises(WriteError) as excinfo:
        write_image(2, target, b"data")
    assert excinfo.value.index == 2
    assert "No space left" in str(excinfo.value)
    assert not target.exists()
    assert not (tmp_path / "img.png.part").exists()


def test_write_image_into_file_parent_fails(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(WriteError):
        write_image(1, blocker / "img.png", b"data")


def test_write_all_streams_paths_in_order(tmp_path):
    spec = OutputSpec(template=tmp_path / "out.png", timestamp=1)
    emitted = []
    errors = []

    report = write_all(
        [(1, b"one"), (2, b"two"), (3, b"three")],
        spec,
        3,
        emit_path=emitted.append,
        report_error=errors.append,
    )

    expected = [tmp_path / f"out_{i}.png" for i in (1, 2, 3)]
    assert emitted == expected
    assert report.written == expected
    assert errors == []
    assert report.exit_code == 0
    assert (tmp_path / "out_3.png").read_bytes() == b"three"


def test_write_all_isolates_failures(tmp_path, monkeypatch):
    spec = OutputSpec(template=tmp_path / "out.png", timestamp=1)
    real_write = output_module.write_image

    def flaky_write(index, path, data):
        if index in (2, 4):
            raise WriteError(index, path, "No space left on device")
        return real_write(index, path, data)

    monkeypatch.setattr(output_module, "write_image", flaky_write)
    emitted = []
    errors = []

    report = write_all(
        [(i, b"x") for i in range(1, 5)],
        spec,
        4,
        emit_path=emitted.append,
        report_error=errors.append,
    )

    assert emitted == [tmp_path / "out_1.png", tmp_path / "out_3.png"]
    assert len(errors) == 2
    assert all("No space left" in message for message in errors)
    assert [outcome.index for outcome in report.failures] == [2, 4]
    assert report.exit_code == 1


def test_write_all_reports_fetch_errors(tmp_path):
    spec = OutputSpec(template=tmp_path / "out.png", timestamp=1)
    emitted = []
    errors = []

    report = write_all(
        [(1, FetchError(1, "HTTP 404")), (2, b"ok")],
        spec,
        2,
        emit_path=emitted.append,
        report_error=errors.append,
    )

    assert emitted == [tmp_path / "out_2.png"]
    assert errors == ["image 1: download failed: HTTP 404"]
    assert not (tmp_path / "out_1.png").exists()
    assert report.exit_code == 1


def test_empty_report_is_failure():
    assert RunReport().exit_code == 1
    assert RunReport([ImageOutcome(index=1, path=Path("a.png"))]).exit_code == 0


def test_write_all_warns_before_overwriting(tmp_path, capsys):
    target = tmp_path / "cat.png"
    target.write_bytes(b"old")
    spec = OutputSpec(template=target, timestamp=1)

    report = write_all([(1, b"new")], spec, 1, emit_path=lambda path: None)

    assert report.exit_code == 0
    assert target.read_bytes() == b"new"
    err = capsys.readouterr().err
    assert f"warning: overwriting existing file {target}" in err
