"""Tests for identity-based deduplication."""

from src.feed.deduplication import dedupe, exclude_ids, merge


class TestDedupe:
    """Tests for dedupe()."""

    def test_keeps_first_occurrence_in_order(self, make_item):
        items = [make_item("a", "A1"), make_item("b"), make_item("a", "A2"), make_item("c")]

        result = dedupe(items)

        assert [i.id for i in result] == ["a", "b", "c"]
        assert result[0].title == "A1"

    def test_idempotent(self, make_item):
        items = [make_item(i) for i in ["x", "y", "x", "z", "y", "x"]]

        once = dedupe(items)

        assert dedupe(once) == once
        assert len({i.id for i in once}) == len(once)

    def test_empty(self):
        assert dedupe([]) == []


class TestMerge:
    """Tests for precedence-ordered merging."""

    def test_earlier_pool_wins(self, make_item):
        a = [make_item("x", "from A"), make_item("a")]
        b = [make_item("b"), make_item("x", "from B")]

        result = merge(a, b)

        assert [i.id for i in result] == ["x", "a", "b"]
        assert result[0].title == "from A"

    def test_accepts_empty_pools(self, make_item):
        assert [i.id for i in merge([], [make_item("a")], [])] == ["a"]


def test_exclude_ids(make_item):
    items = [make_item("a"), make_item("b"), make_item("c")]
    assert [i.id for i in exclude_ids(items, {"b"})] == ["a", "c"]
