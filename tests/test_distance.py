"""Tests for distance and travel time calculations."""

from star_empires.utils import euclidean_distance, travel_turns


class TestEuclideanDistance:
    """Test straight-line distance calculation."""

    def test_distance_same_point(self):
        """Test distance from a point to itself."""
        assert euclidean_distance(5, 5, 5, 5) == 0

    def test_distance_axis_aligned(self):
        """Test distance for horizontal and vertical offsets."""
        assert euclidean_distance(0, 0, 300, 0) == 300
        assert euclidean_distance(0, 300, 0, 0) == 300

    def test_distance_diagonal(self):
        """Test distance for a 3-4-5 triangle."""
        assert euclidean_distance(0, 0, 3, 4) == 5.0
        assert euclidean_distance(-3, -4, 0, 0) == 5.0


class TestTravelTurns:
    """Test turn count for a journey."""

    def test_exact_multiple(self):
        """300 units at speed 1.0 takes exactly 3 turns."""
        assert travel_turns(300, 1.0) == 3

    def test_partial_turn_rounds_up(self):
        assert travel_turns(250, 1.0) == 3
        assert travel_turns(301, 1.5) == 3

    def test_minimum_one_turn(self):
        """Even a zero-length or zero-speed trip takes one turn."""
        assert travel_turns(0, 1.0) == 1
        assert travel_turns(10, 0) == 1
