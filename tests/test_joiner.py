"""
Unit tests for the set-difference join.
"""
from pathdedup.core.grouper import group_records
from pathdedup.core.joiner import build_discard_set, join
from pathdedup.core.models import Record, DuplicateGroup


class TestJoin:
    def test_keeps_representative_and_unrelated(self, scenario_records):
        discard = build_discard_set(group_records(scenario_records))
        kept = [r.path for r in join(scenario_records, discard)]
        assert kept == ["a", "c"]

    def test_empty_groups_keep_everything(self, scenario_records):
        assert list(join(scenario_records, build_discard_set([]))) == scenario_records

    def test_discard_set_holds_non_representatives(self):
        groups = [DuplicateGroup(paths=("a", "b", "c")), DuplicateGroup(paths=("x", "y"))]
        assert build_discard_set(groups) == {"b", "c", "y"}

    def test_file_order_decides_representative(self):
        """Loaded groups are not re-sorted: the first listed path survives."""
        records = [Record("a", 1, "h"), Record("b", 1, "h")]
        discard = build_discard_set([DuplicateGroup(paths=("b", "a"))])
        assert [r.path for r in join(records, discard)] == ["b"]

    def test_unknown_group_paths_are_ignored(self):
        records = [Record("a", 1, "h")]
        discard = build_discard_set([DuplicateGroup(paths=("elsewhere", "gone"))])
        assert [r.path for r in join(records, discard)] == ["a"]

    def test_streams_in_input_order(self):
        records = [Record(p, 1, "h") for p in ("d", "b", "a", "c")]
        discard = {"b"}
        assert [r.path for r in join(iter(records), discard)] == ["d", "a", "c"]
