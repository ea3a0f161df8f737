"""Unit tests for the bid-sweep liquidation simulator.

Tests cover:
- Single-book sweeps (partial, full, exhausted)
- Non-positive and non-finite quantities
- Zero-size and non-finite bare levels
- Multi-source pooling, attribution and tie-breaking
- Agreement between single- and multi-source forms
"""

import math

import pytest

from depthsweep.domain.depth import DepthSnapshot, PriceLevel, SourcedDepth
from depthsweep.engine.liquidation import (
    simulate_liquidation,
    simulate_multi_source_liquidation,
)


class TestSimulateLiquidation:
    """Tests for single-book sweeps."""

    def test_partial_sweep_across_two_levels(self):
        result = simulate_liquidation([(100, 2), (90, 2)], 3)
        assert result.realized_proceeds == pytest.approx(290)
        assert result.average_realized_price == pytest.approx(96.6666667)
        assert result.exhausted is False
        assert result.unsold_quantity == 0
        assert result.levels_consumed == 2

    def test_exhausted_depth(self):
        result = simulate_liquidation([(50, 1)], 2)
        assert result.realized_proceeds == pytest.approx(50)
        assert result.exhausted is True
        assert result.unsold_quantity == pytest.approx(1)
        assert result.unsold_fraction == pytest.approx(0.5)

    def test_unsorted_input_is_swept_best_first(self):
        result = simulate_liquidation([PriceLevel(90, 2), PriceLevel(100, 2)], 2)
        assert result.realized_proceeds == pytest.approx(200)
        assert result.levels_consumed == 1

    @pytest.mark.parametrize("quantity", [0, -1, -0.001])
    def test_non_positive_quantity_is_a_no_op(self, quantity):
        result = simulate_liquidation([(100, 2)], quantity)
        assert result.realized_proceeds == 0
        assert result.exhausted is False
        assert result.total_to_sell == 0
        assert result.sold_quantity + result.unsold_quantity == result.total_to_sell

    def test_zero_size_levels_are_skipped(self):
        result = simulate_liquidation([(100, 0), (99, 1)], 1)
        assert result.realized_proceeds == pytest.approx(99)
        assert result.levels_consumed == 1

    def test_empty_bids(self):
        result = simulate_liquidation([], 5)
        assert result.exhausted is True
        assert result.unsold_quantity == 5
        assert result.average_realized_price == 0

    @pytest.mark.parametrize(
        "bids,quantity",
        [
            ([(100, 2), (90, 2)], 3),
            ([(100, 2), (90, 2)], 10),
            ([(10.5, 0.3), (10.4, 0.7), (9.9, 1.1)], 1.05),
            ([], 1),
        ],
    )
    def test_quantity_is_conserved(self, bids, quantity):
        result = simulate_liquidation(bids, quantity)
        assert result.sold_quantity + result.unsold_quantity == pytest.approx(result.total_to_sell)

    @pytest.mark.parametrize("quantity", [math.inf, -math.inf, math.nan])
    def test_non_finite_quantity_rejected(self, quantity):
        with pytest.raises(ValueError, match="finite"):
            simulate_liquidation([(100, 1)], quantity)

    def test_non_finite_levels_are_dropped(self):
        result = simulate_liquidation([(100, math.nan), (math.inf, 5), ("n/a", 1), (90, 1)], 1)
        assert result.realized_proceeds == pytest.approx(90)
        assert result.levels_consumed == 1
        assert result.exhausted is False


class TestSimulateMultiSourceLiquidation:
    """Tests for pooled multi-venue sweeps."""

    def test_best_price_wins_regardless_of_source(self, make_book):
        books = [make_book("a", [(100, 1)]), make_book("b", [(101, 1)])]
        result = simulate_multi_source_liquidation(books, 1)

        assert result.realized_proceeds == pytest.approx(101)
        assert result.for_source("b").realized_proceeds == pytest.approx(101)
        assert result.for_source("a").sold_quantity == 0

    def test_fill_spans_two_sources(self, make_book):
        books = [make_book("a", [(100, 0.4)]), make_book("b", [(99, 0.6)])]
        result = simulate_multi_source_liquidation(books, 1)

        assert result.realized_proceeds == pytest.approx(99.4)
        assert len(result.breakdown) == 2
        assert result.exhausted is False

    def test_breakdown_sorted_by_proceeds(self, make_book):
        books = [make_book("a", [(100, 0.4)]), make_book("b", [(99, 0.6)])]
        result = simulate_multi_source_liquidation(books, 1)
        assert [entry.source for entry in result.breakdown] == ["b", "a"]

    def test_equal_prices_go_to_earlier_source_name(self, make_book):
        books = [make_book("zeta", [(100, 1)]), make_book("alpha", [(100, 1)])]
        result = simulate_multi_source_liquidation(books, 1)

        assert result.for_source("alpha").sold_quantity == 1
        assert result.for_source("zeta").sold_quantity == 0

    def test_tie_break_independent_of_input_order(self, make_book):
        books = [make_book("x", [(100, 1), (99, 3)]), make_book("m", [(100, 1), (98, 2)])]
        forward = simulate_multi_source_liquidation(books, 2.5)
        backward = simulate_multi_source_liquidation(list(reversed(books)), 2.5)
        assert forward == backward

    def test_synthetic_fill_is_tracked(self):
        book = SourcedDepth(
            source="okx",
            depth=DepthSnapshot(bids=(PriceLevel(100, 1), PriceLevel(90, 5, synthetic=True))),
        )
        result = simulate_multi_source_liquidation([book], 3)
        entry = result.for_source("okx")
        assert entry.synthetic_quantity == pytest.approx(2)
        assert entry.sold_quantity == pytest.approx(3)

    def test_zero_quantity(self, make_book):
        result = simulate_multi_source_liquidation([make_book("a", [(100, 1)])], 0)
        assert result.total_to_sell == 0
        assert result.realized_proceeds == 0
        assert result.exhausted is False
        assert result.for_source("a").sold_quantity == 0

    def test_no_books_is_exhausted(self):
        result = simulate_multi_source_liquidation([], 2)
        assert result.exhausted is True
        assert result.unsold_quantity == 2
        assert result.breakdown == ()

    def test_non_finite_quantity_rejected(self, make_book):
        with pytest.raises(ValueError, match="finite"):
            simulate_multi_source_liquidation([make_book("okx", [(100, 1)])], math.inf)

    def test_matches_single_source_simulation(self, make_book):
        bids = [(100, 2), (95, 1), (90, 4)]
        single = simulate_liquidation(bids, 5)
        multi = simulate_multi_source_liquidation([make_book("only", bids)], 5)

        assert multi.realized_proceeds == pytest.approx(single.realized_proceeds)
        assert multi.average_realized_price == pytest.approx(single.average_realized_price)
        assert multi.exhausted == single.exhausted
        assert multi.unsold_quantity == pytest.approx(single.unsold_quantity)

    def test_quantity_is_conserved(self, make_book):
        books = [make_book("a", [(100, 0.3), (97, 0.2)]), make_book("b", [(99, 0.25)])]
        result = simulate_multi_source_liquidation(books, 2)
        assert result.sold_quantity + result.unsold_quantity == pytest.approx(result.total_to_sell)
        assert sum(e.sold_quantity for e in result.breakdown) == pytest.approx(result.sold_quantity)

    def test_to_dict_includes_breakdown(self, make_book):
        result = simulate_multi_source_liquidation([make_book("a", [(100, 1)])], 1)
        data = result.to_dict()
        assert data["breakdown"][0]["source"] == "a"
        assert data["sold_quantity"] == 1
