"""Tests for cell and region addressing."""

import pytest

from worldplan.core.sim_grid import (
    Bounds,
    Cell,
    cell_bounds,
    cell_center,
    cell_count,
    cell_for_position,
    contains_cell,
    format_bounds,
    iter_cells,
    make_region_id,
    parse_bounds,
    parse_region_id,
)


class TestCellGeometry:
    """Test world-space cell math."""

    def test_cell_bounds(self):
        """Test world bounds of a cell."""
        b = cell_bounds(Cell(2, -1), 64)
        assert b.min_x == 128
        assert b.max_x == 192
        assert b.min_z == -64
        assert b.max_z == 0

    def test_cell_center(self):
        """Test world centre of a cell."""
        c = cell_center(Cell(0, 0), 64)
        assert (c.x, c.z) == (32, 32)
        c = cell_center(Cell(-1, 3), 10)
        assert (c.x, c.z) == (-5, 35)

    def test_cell_for_position(self):
        """Test positions map to the containing cell, flooring negatives."""
        assert cell_for_position(0, 0, 64) == Cell(0, 0)
        assert cell_for_position(63.9, 64, 64) == Cell(0, 1)
        assert cell_for_position(-0.5, -64, 64) == Cell(-1, -1)

    def test_iter_cells_row_major(self):
        """Test cells are enumerated with cz outer and cx inner."""
        cells = list(iter_cells(Bounds(0, 1, 5, 6)))
        assert cells == [Cell(0, 5), Cell(1, 5), Cell(0, 6), Cell(1, 6)]

    def test_cell_count_and_contains(self):
        """Test cell counting and containment."""
        bounds = Bounds(-2, 2, -1, 1)
        assert cell_count(bounds) == 15
        assert len(list(iter_cells(bounds))) == 15
        assert contains_cell(bounds, Cell(-2, 1))
        assert not contains_cell(bounds, Cell(3, 0))

    def test_empty_bounds(self):
        """Test inverted bounds contain nothing."""
        bounds = Bounds(1, 0, 0, 0)
        assert cell_count(bounds) == 0
        assert list(iter_cells(bounds)) == []


class TestRegionIds:
    """Test region id construction and parsing."""

    def test_make_region_id(self):
        """Test canonical format."""
        assert make_region_id("prime_shard", Cell(0, 0)) == "prime_shard:0,0"
        assert make_region_id("prime_shard", Cell(-3, 12)) == "prime_shard:-3,12"

    def test_parse_round_trip(self):
        """Test parsing a built id gives back shard and cell."""
        assert parse_region_id(make_region_id("s1", Cell(-4, 7))) == ("s1", Cell(-4, 7))

    def test_parse_shard_with_colon(self):
        """Test only the last colon separates the coordinates."""
        assert parse_region_id("realm:eu:1,2") == ("realm:eu", Cell(1, 2))

    @pytest.mark.parametrize("bad", ["", "no_colon", ":1,2", "shard:1", "shard:a,b", "shard:1,2,3"])
    def test_parse_malformed(self, bad):
        """Test malformed ids parse to None."""
        assert parse_region_id(bad) is None


class TestBoundsText:
    """Test operator bounds strings."""

    def test_parse_bounds(self):
        """Test the standard two-range form."""
        assert parse_bounds("-8..8,-4..4") == Bounds(-8, 8, -4, 4)

    def test_parse_bounds_reorders(self):
        """Test inverted ranges are reordered."""
        assert parse_bounds("3..1, 2..-2") == Bounds(1, 3, -2, 2)

    def test_parse_bounds_single_number(self):
        """Test a bare number means a single cell."""
        assert parse_bounds("5,0..2") == Bounds(5, 5, 0, 2)

    @pytest.mark.parametrize("bad", ["", "1..2", "a..b,0..0", "1..2,0..x", "1,2,3"])
    def test_parse_bounds_invalid(self, bad):
        """Test malformed bounds raise ValueError."""
        with pytest.raises(ValueError):
            parse_bounds(bad)

    def test_format_bounds(self):
        """Test formatting matches the parse form."""
        bounds = Bounds(-8, 8, -4, 4)
        assert format_bounds(bounds) == "-8..8,-4..4"
        assert parse_bounds(format_bounds(bounds)) == bounds
