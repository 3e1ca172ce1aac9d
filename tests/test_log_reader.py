import io

import pytest

from log_processing.log_reader import LogLine, expand_log_paths, read_file, read_files, read_stream, read_upload


def test_read_file_numbers_lines(tmp_path):
    path = tmp_path / "mongod.log"
    path.write_text("first\r\nsecond\nthird", encoding="utf-8")

    lines = list(read_file(path))

    assert lines == [
        LogLine(str(path), 1, "first"),
        LogLine(str(path), 2, "second"),
        LogLine(str(path), 3, "third"),
    ]


def test_read_file_empty(tmp_path):
    path = tmp_path / "empty.log"
    path.write_text("", encoding="utf-8")

    assert list(read_file(path)) == []


def test_read_file_missing_raises_file_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        list(read_file(tmp_path / "does_not_exist.log"))


def test_read_files_restarts_numbering_per_file(tmp_path):
    a = tmp_path / "a.log"
    b = tmp_path / "b.log"
    a.write_text("a1\na2", encoding="utf-8")
    b.write_text("b1", encoding="utf-8")

    lines = list(read_files([a, b]))

    assert [(ln.source, ln.number, ln.text) for ln in lines] == [
        (str(a), 1, "a1"),
        (str(a), 2, "a2"),
        (str(b), 1, "b1"),
    ]


def test_read_files_skip_missing(tmp_path, caplog):
    a = tmp_path / "a.log"
    a.write_text("a1", encoding="utf-8")
    missing = tmp_path / "missing.log"

    with caplog.at_level("WARNING"):
        lines = list(read_files([missing, a], skip_missing=True))

    assert [ln.text for ln in lines] == ["a1"]
    assert "missing.log" in caplog.text
    with pytest.raises(FileNotFoundError):
        list(read_files([a, missing]))


def test_expand_log_paths_expands_directories(tmp_path):
    logs = tmp_path / "logs"
    logs.mkdir()
    (logs / "b.log").write_text("", encoding="utf-8")
    (logs / "a.log").write_text("", encoding="utf-8")
    (logs / "notes.txt").write_text("", encoding="utf-8")
    single = tmp_path / "single.txt"

    assert expand_log_paths([logs, single]) == [logs / "a.log", logs / "b.log", single]
    assert expand_log_paths([logs], pattern="*.txt") == [logs / "notes.txt"]


def test_read_stream():
    lines = list(read_stream(io.StringIO("x\ny\n"), source="pipe"))
    assert lines == [LogLine("pipe", 1, "x"), LogLine("pipe", 2, "y")]


@pytest.mark.parametrize("first_line", [0, -3])
def test_read_stream_rejects_invalid_first_line_on_call(first_line):
    with pytest.raises(ValueError):
        read_stream(io.StringIO("x"), first_line=first_line)


def test_read_upload_replaces_undecodable_bytes():
    lines = list(read_upload(b"ok\r\nbad \xff byte\n", source="upload.log"))

    assert [ln.number for ln in lines] == [1, 2]
    assert lines[0].text == "ok"
    assert lines[1].text == "bad \ufffd byte"
    assert lines[1].source == "upload.log"


def test_read_upload_splits_like_read_file(tmp_path):
    data = "form\x0cfeed\nvertical\x0btab\npara\u2028sep\r\nlast".encode("utf-8")
    path = tmp_path / "upload.log"
    path.write_bytes(data)

    uploaded = [ln.text for ln in read_upload(data)]

    assert uploaded == [ln.text for ln in read_file(path)]
    assert uploaded == ["form\x0cfeed", "vertical\x0btab", "para\u2028sep", "last"]
