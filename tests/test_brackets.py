"""Tests for the bracket sequence grouper."""

from pathlib import Path

from ps_app.modules.photosort.brackets import BracketGrouper


def _run(feed):
    grouper = BracketGrouper()
    groups = []
    for path, index in feed:
        groups.extend(grouper.push(Path(path), index))
    groups.extend(grouper.finish())
    return groups


class TestBracketGrouper:
    def test_restart_at_one_closes_sequence(self):
        groups = _run(
            [("/p/A1.jpg", 1), ("/p/A2.jpg", 2), ("/p/A3.jpg", 3), ("/p/B1.jpg", 1)]
        )

        assert [len(g) for g in groups] == [3, 1]
        first, second = groups
        assert [info.sequence_number for _, info in first.members] == [1, 2, 3]
        assert {info.sequence_length for _, info in first.members} == {3}
        assert {info.first for _, info in first.members} == {Path("/p/A1.jpg")}
        assert {info.last for _, info in first.members} == {Path("/p/A3.jpg")}
        assert second.members[0][1].sequence_length == 1
        assert first.group_index < second.group_index

    def test_gap_in_index_closes_sequence(self):
        groups = _run([("/p/a.jpg", 1), ("/p/b.jpg", 3)])
        assert [len(g) for g in groups] == [1, 1]

    def test_parent_change_closes_sequence(self):
        groups = _run([("/p/a.jpg", 1), ("/q/b.jpg", 2)])
        assert [len(g) for g in groups] == [1, 1]

    def test_non_bracketed_file_flushes_pending(self):
        grouper = BracketGrouper()
        assert grouper.push(Path("/p/a.jpg"), 1) == []
        assert grouper.push(Path("/p/b.jpg"), 2) == []
        closed = grouper.push(Path("/p/c.jpg"), None)
        assert len(closed) == 1
        assert len(closed[0]) == 2
        assert grouper.pending == 0
        assert grouper.finish() == []

    def test_non_bracketed_without_pending_emits_nothing(self):
        grouper = BracketGrouper()
        assert grouper.push(Path("/p/a.jpg"), None) == []
        assert grouper.groups_emitted == 0

    def test_group_index_increments_per_flush(self):
        groups = _run(
            [("/p/a.jpg", 1), ("/p/b.jpg", 1), ("/p/c.jpg", 1), ("/p/d.jpg", 2)]
        )
        assert [g.group_index for g in groups] == [0, 1, 2]
        assert [len(g) for g in groups] == [1, 1, 2]

    def test_sequence_may_start_above_one(self):
        groups = _run([("/p/a.jpg", 4), ("/p/b.jpg", 5)])
        assert len(groups) == 1
        assert [info.sequence_number for _, info in groups[0].members] == [4, 5]
