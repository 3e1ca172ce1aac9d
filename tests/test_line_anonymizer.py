import json

import pytest

from log_processing.line_anonymizer import (
    anonymize_files,
    anonymize_line,
    anonymize_lines,
    anonymize_upload,
    lines_to_text,
)
from log_processing.log_reader import LogLine
from obfuscation.obfuscator import Obfuscator


@pytest.fixture
def obfuscator():
    return Obfuscator()


def test_text_line_goes_through_string_pipeline(obfuscator):
    line = "user@example.com connected from 192.168.1.100"
    expected = Obfuscator().obfuscate_string(line)

    assert anonymize_line(line, obfuscator) == expected


def test_json_line_keeps_keys_and_scales_numbers(obfuscator):
    line = '{"t": {"$date": "2024-06-15"}, "attr": {"remote": "10.0.0.5", "durationMillis": 150}}'

    doc = json.loads(anonymize_line(line, obfuscator))

    assert list(doc) == ["t", "attr"]
    assert doc["t"]["$date"] == "2024-05-03"
    assert doc["attr"]["remote"] == obfuscator.obfuscate_ip("10.0.0.5")
    assert doc["attr"]["durationMillis"] == int(150 * 0.917)


def test_json_line_keeps_non_ascii(obfuscator):
    assert anonymize_line('{"msg": "café"}', obfuscator) == '{"msg": "café"}'


@pytest.mark.parametrize("line", ["{not json}", "[1, 2]", "{", ""])
def test_non_object_lines_are_treated_as_text(obfuscator, line):
    assert anonymize_line(line, obfuscator) == obfuscator.obfuscate_string(line)


def test_same_value_on_different_lines_gets_same_substitute(obfuscator):
    lines = [
        LogLine("a.log", 1, "accepted 192.168.1.100"),
        LogLine("a.log", 2, '{"remote": "192.168.1.100"}'),
    ]

    out = list(anonymize_lines(lines, obfuscator))

    new_ip = obfuscator.obfuscate_ip("192.168.1.100")
    assert out[0] == LogLine("a.log", 1, f"accepted {new_ip}")
    assert json.loads(out[1].text) == {"remote": new_ip}


def test_anonymize_upload(obfuscator):
    out = anonymize_upload(b"plain line\nssn 123-45-6789\n", obfuscator, source="upload.log")

    assert [ln.number for ln in out] == [1, 2]
    assert out[0].text == "plain line"
    assert out[1].text == f"ssn {obfuscator.obfuscate_ssn('123-45-6789')}"
    assert all(ln.source == "upload.log" for ln in out)


def test_anonymize_files(tmp_path, obfuscator):
    path = tmp_path / "mongod.log"
    path.write_text("host 10.0.0.5\n", encoding="utf-8")

    out = list(anonymize_files([tmp_path], obfuscator))

    assert out == [LogLine(str(path), 1, f"host {obfuscator.obfuscate_ip('10.0.0.5')}")]


def test_lines_to_text():
    assert lines_to_text([LogLine("a", 1, "x"), LogLine("a", 2, "y")]) == "x\ny"
    assert lines_to_text([]) == ""
