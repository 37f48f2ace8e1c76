"""
Tests for the text artifacts: records files, path-only files and group exports.
"""
import json

import pytest

from pathdedup.core.errors import MalformedInputError
from pathdedup.core.models import Record, DuplicateGroup
from pathdedup.services.record_store import (
    read_records, read_paths, read_groups, write_groups, RecordWriter
)


class TestRecordsFile:
    def test_written_file_has_header(self, tmp_path):
        target = tmp_path / "out.csv"
        with RecordWriter(str(target)) as writer:
            writer.write(Record("a b.txt", 3, "abc"))
        assert target.read_text(encoding="utf-8") == "path,size,hash\na b.txt,3,abc\n"
        assert writer.lines_written == 1

    def test_paths_needing_quotes(self, tmp_path, records_file):
        records = [Record('odd, "name".txt', 5, "h"), Record("line\nbreak", 6, "")]
        assert list(read_records(records_file(records))) == records

    def test_empty_file_yields_nothing(self, tmp_path):
        source = tmp_path / "empty.csv"
        source.write_text("")
        assert list(read_records(str(source))) == []

    def test_unicode_paths(self, records_file):
        records = [Record("/música/canção.mp3", 7, "h")]
        assert list(read_records(records_file(records))) == records

    def test_undecodable_path_round_trips(self, tmp_path, records_file):
        """Names os.walk decoded with surrogate escapes keep their original bytes."""
        path = "/data/bad\udcff.txt"
        source = records_file([Record(path, 4, "h")])
        assert b"bad\xff.txt" in (tmp_path / "records.csv").read_bytes()
        assert list(read_records(source)) == [Record(path, 4, "h")]

    def test_invalid_utf8_bytes_are_read_as_escapes(self, tmp_path):
        source = tmp_path / "foreign.csv"
        source.write_bytes(b"path,size,hash\n/x/caf\xe9,1,h\n")
        assert list(read_records(str(source))) == [Record("/x/caf\udce9", 1, "h")]
        assert list(read_paths(str(source))) == [("/x/caf\udce9", 1)]

    @pytest.mark.parametrize("content", [
        "name,size,hash\na,1,h\n",      # wrong header
        "path,size,hash\na,x,h\n",      # non-numeric size
        "path,size,hash\na,-1,h\n",     # negative size
        "path,size,hash\na,1\n",        # missing field
        "path,size,hash\na,1,h,extra\n",
        "path,size,hash\n,1,h\n",       # empty path
    ])
    def test_malformed_rows_are_fatal(self, tmp_path, content):
        source = tmp_path / "bad.csv"
        source.write_text(content)
        with pytest.raises(MalformedInputError):
            list(read_records(str(source)))

    def test_error_names_source_and_line(self, tmp_path):
        source = tmp_path / "bad.csv"
        source.write_text("path,size,hash\na,1,h\nb,oops,h\n")
        with pytest.raises(MalformedInputError) as exc_info:
            list(read_records(str(source)))
        assert exc_info.value.line == 3
        assert "bad.csv" in str(exc_info.value)


class TestPathOnly:
    def test_only_paths_output_has_no_header(self, tmp_path):
        target = tmp_path / "paths.txt"
        with RecordWriter(str(target), only_paths=True) as writer:
            writer.write_all([Record("a", 1, "h"), Record("b,c", 2, "h")])
        assert target.read_text(encoding="utf-8") == 'a\n"b,c"\n'

    def test_read_paths_from_path_only_file(self, tmp_path):
        source = tmp_path / "paths.txt"
        source.write_text('a\n"b,c"\n')
        assert list(read_paths(str(source))) == [("a", None), ("b,c", None)]

    def test_read_paths_from_records_file(self, records_file):
        source = records_file([Record("a", 1, "h"), Record("b", 2, "")])
        assert list(read_paths(source)) == [("a", 1), ("b", 2)]


class TestGroupExport:
    def test_exact_layout(self, tmp_path):
        target = tmp_path / "dups.json"
        groups = [DuplicateGroup(paths=("a", "b")), DuplicateGroup(paths=("c", "d", "e"))]
        assert write_groups(str(target), groups) == (2, 5)
        assert target.read_text(encoding="utf-8") == '[\n\t["a", "b"],\n\t["c", "d", "e"]\n]\n'

    def test_export_is_valid_json(self, tmp_path):
        target = tmp_path / "dups.json"
        write_groups(str(target), [DuplicateGroup(paths=('quo"te', "back\\slash"))])
        assert json.loads(target.read_text(encoding="utf-8")) == [['quo"te', "back\\slash"]]

    def test_undecodable_paths_round_trip(self, tmp_path):
        target = tmp_path / "dups.json"
        paths = ("/d/bad\udcff.txt", "/d/copy\udcff.txt")
        write_groups(str(target), [DuplicateGroup(paths=paths)])
        assert b"bad\xff.txt" in target.read_bytes()
        assert [g.paths for g in read_groups(str(target))] == [paths]

    def test_empty_export(self, tmp_path):
        target = tmp_path / "dups.json"
        assert write_groups(str(target), []) == (0, 0)
        assert read_groups(str(target)) == []

    def test_read_keeps_file_order(self, tmp_path):
        source = tmp_path / "dups.json"
        source.write_text('[\n\t["z", "a"]\n]\n')
        groups = read_groups(str(source))
        assert groups[0].paths == ("z", "a")
        assert groups[0].representative == "z"

    @pytest.mark.parametrize("content", [
        "not json",
        '{"a": ["b", "c"]}',
        '[["only-one"]]',
        '[["a", 1]]',
        '["a", "b"]',
    ])
    def test_malformed_export_is_fatal(self, tmp_path, content):
        source = tmp_path / "dups.json"
        source.write_text(content)
        with pytest.raises(MalformedInputError):
            read_groups(str(source))
