"""Tests for move-by-offset reordering helpers."""

from dataclasses import dataclass

import pytest

from gymlog.core.exceptions import InvalidReorderError
from gymlog.services.ordering import move, move_within_scope, ordered, reindex, validate_move


@dataclass
class Item:
    name: str
    order: int = 0
    scope: str = "a"


class TestMove:
    """Tests for moving a block of elements."""

    def test_move_forward_accounts_for_removed_elements(self):
        assert move(["A", "B", "C", "D"], [0], 3) == ["B", "C", "A", "D"]

    def test_move_to_end(self):
        assert move(["A", "B", "C", "D"], [0], 4) == ["B", "C", "D", "A"]

    def test_move_backward(self):
        assert move(["A", "B", "C", "D"], [3], 0) == ["D", "A", "B", "C"]

    def test_move_block_keeps_relative_order(self):
        assert move(["A", "B", "C", "D", "E"], [3, 0], 2) == ["B", "A", "D", "C", "E"]

    def test_move_onto_own_position_is_identity(self):
        items = ["A", "B", "C"]
        assert move(items, [1], 1) == items
        assert move(items, [1], 2) == items

    def test_move_does_not_mutate_input(self):
        items = ["A", "B", "C"]
        move(items, [0], 3)
        assert items == ["A", "B", "C"]

    @pytest.mark.parametrize(
        "from_indices,to_index",
        [([4], 0), ([-1], 0), ([0], 5), ([0], -1)],
    )
    def test_out_of_range_indices_raise(self, from_indices, to_index):
        with pytest.raises(InvalidReorderError):
            move(["A", "B", "C", "D"], from_indices, to_index)

    def test_empty_selection_is_a_noop(self):
        items = ["A", "B", "C"]

        result = move(items, [], 1)

        assert result == items
        assert result is not items

    def test_invalid_reorder_is_an_index_error(self):
        with pytest.raises(IndexError):
            validate_move(2, [2], 0)

    def test_validate_move_deduplicates_sources(self):
        assert validate_move(5, [3, 1, 3], 0) == [1, 3]


class TestScopedMove:
    """Tests for moves restricted to one scope of a larger list."""

    def test_out_of_scope_items_keep_their_slots(self):
        items = [
            Item("r1", scope="resistance"),
            Item("c1", scope="cardio"),
            Item("r2", scope="resistance"),
            Item("c2", scope="cardio"),
            Item("r3", scope="resistance"),
        ]

        result = move_within_scope(items, lambda i: i.scope == "resistance", [0], 3)

        assert [i.name for i in result] == ["r2", "c1", "r3", "c2", "r1"]
        assert result[1] is items[1]
        assert result[3] is items[3]

    def test_scoped_indices_are_validated_against_scope_size(self):
        items = [Item("r1", scope="resistance"), Item("c1", scope="cardio")]
        with pytest.raises(InvalidReorderError):
            move_within_scope(items, lambda i: i.scope == "resistance", [1], 0)


class TestReindex:
    """Tests for dense position assignment."""

    def test_reindex_assigns_positions(self):
        items = [Item("a", order=7), Item("b", order=2), Item("c", order=5)]

        changed = reindex(items)

        assert [i.order for i in items] == [0, 1, 2]
        assert changed == 3

    def test_reindex_counts_only_changes(self):
        items = [Item("a", order=0), Item("b", order=5)]
        assert reindex(items) == 1

    def test_ordered_sorts_by_position(self):
        items = [Item("b", order=1), Item("a", order=0)]
        assert [i.name for i in ordered(items)] == ["a", "b"]
