"""Tests for the SCAN dispatcher's per-elevator decisions."""

from __future__ import annotations

import logging

import pytest

from dispatch import Action, ScanDispatcher, get_dispatcher
from simulation import Building, CommandKind, Direction, ElevatorConstraints, ElevatorStatus

STOPPED = ElevatorStatus.STOPPED
OPEN = ElevatorStatus.OPEN
MOVING_UP = ElevatorStatus.MOVING_UP
MOVING_DOWN = ElevatorStatus.MOVING_DOWN


@pytest.fixture
def dispatcher() -> ScanDispatcher:
    return ScanDispatcher()


class TestServingAFloor:
    """A rider waits at floor 5 heading up while elevator 0 sweeps up."""

    def test_moving_car_stops_first(self, dispatcher, building, observe, make_passenger):
        observe(building, [(0, 5, MOVING_UP, [])], [make_passenger(1, 5, 10)])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.STOP)]

    def test_stopped_car_opens(self, dispatcher, building, observe, make_passenger):
        observe(building, [(0, 5, STOPPED, [])], [make_passenger(1, 5, 10)])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.OPEN)]

    def test_open_car_boards_and_consumes_call(self, dispatcher, building, observe, make_passenger):
        observe(building, [(0, 5, OPEN, [])], [make_passenger(1, 5, 10)])

        assert dispatcher.dispatch(building) == [Action(0, CommandKind.ENTER, (1,))]
        assert building.calls.peek(5) == []

    def test_exit_beats_enter(self, dispatcher, building, observe, make_passenger):
        riding = make_passenger(2, 1, 5)
        waiting = make_passenger(3, 5, 8)
        observe(building, [(0, 5, OPEN, [riding])], [waiting])

        assert dispatcher.dispatch(building) == [Action(0, CommandKind.EXIT, (2,))]
        assert building.calls.peek(5) == [waiting]

    def test_boarding_is_first_come_first_served_up_to_capacity(
        self, dispatcher, building, observe, make_passenger
    ):
        riders = [make_passenger(100 + i, 1, 20) for i in range(building.max_carrying - 1)]
        p4 = make_passenger(4, 3, 9)
        p5 = make_passenger(5, 3, 12)
        observe(building, [(0, 3, OPEN, riders)], [p4, p5])

        assert dispatcher.dispatch(building) == [Action(0, CommandKind.ENTER, (4,))]
        assert building.calls.peek(3) == [p5]

    def test_arrived_riders_all_exit_regardless_of_capacity(self, dispatcher, observe, make_passenger):
        building = Building.create(1, ElevatorConstraints(max_floor=25, max_carrying=3))
        riders = [make_passenger(i, 1, 6) for i in range(3)]
        observe(building, [(0, 6, OPEN, riders)])

        assert dispatcher.dispatch(building) == [Action(0, CommandKind.EXIT, (0, 1, 2))]

    def test_ignores_riders_heading_the_other_way(self, dispatcher, building, observe, make_passenger):
        observe(building, [(0, 5, MOVING_UP, [])], [make_passenger(1, 5, 2)])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.UP)]

    def test_full_car_passes_by(self, dispatcher, building, observe, make_passenger):
        riders = [make_passenger(100 + i, 1, 20) for i in range(building.max_carrying)]
        observe(building, [(0, 5, MOVING_UP, riders)], [make_passenger(1, 5, 10)])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.UP)]

    def test_full_open_car_closes(self, dispatcher, building, observe, make_passenger):
        riders = [make_passenger(100 + i, 1, 20) for i in range(building.max_carrying)]
        observe(building, [(0, 5, OPEN, riders)], [make_passenger(1, 5, 10)])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.CLOSE)]


class TestMoving:
    def test_open_car_with_nothing_to_do_closes(self, dispatcher, building, observe):
        observe(building, [(0, 5, OPEN, [])])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.CLOSE)]

    def test_stopped_car_resumes_sweep(self, dispatcher, building, observe):
        observe(building, [(0, 5, STOPPED, [])])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.UP)]

    def test_down_sweep_moves_down(self, dispatcher, observe, constraints):
        building = Building.create(2, constraints)
        observe(building, [(1, 9, MOVING_DOWN, [])])
        assert dispatcher.dispatch(building) == [Action(1, CommandKind.DOWN)]


class TestBoundaryReversal:
    def test_top_floor_stop_then_flip_then_down(self, dispatcher, building, observe):
        observe(building, [(0, 25, MOVING_UP, [])])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.STOP)]
        assert building.assign(0) is Direction.UP

        observe(building, [(0, 25, STOPPED, [])])
        assert dispatcher.dispatch(building) == []
        assert building.assign(0) is Direction.DOWN

        observe(building, [(0, 25, STOPPED, [])])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.DOWN)]

    def test_open_at_top_closes_before_flipping(self, dispatcher, building, observe):
        observe(building, [(0, 25, OPEN, [])])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.CLOSE)]
        assert building.assign(0) is Direction.UP

    def test_bottom_floor_flips_to_up(self, dispatcher, observe, constraints):
        building = Building.create(2, constraints)
        observe(building, [(1, 1, MOVING_DOWN, [])])
        assert dispatcher.dispatch(building) == [Action(1, CommandKind.STOP)]

        observe(building, [(1, 1, STOPPED, [])])
        assert dispatcher.dispatch(building) == []
        assert building.assign(1) is Direction.UP

    def test_no_flip_below_the_top(self, dispatcher, building, observe):
        observe(building, [(0, 24, STOPPED, [])])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.UP)]
        assert building.assign(0) is Direction.UP

    def test_after_flip_picks_up_down_riders_at_top(self, dispatcher, building, observe, make_passenger):
        building.flip(0)
        observe(building, [(0, 25, STOPPED, [])], [make_passenger(1, 25, 3)])
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.OPEN)]


class TestDispatchPass:
    def test_one_action_per_elevator_in_id_order(self, dispatcher, observe, constraints, make_passenger):
        building = Building.create(4, constraints)
        observe(
            building,
            [
                (3, 10, MOVING_DOWN, []),
                (0, 5, MOVING_UP, []),
                (2, 7, OPEN, []),
                (1, 25, STOPPED, []),
            ],
            [make_passenger(1, 5, 10)],
        )

        actions = dispatcher.dispatch(building)

        assert actions == [
            Action(0, CommandKind.STOP),
            Action(1, CommandKind.DOWN),
            Action(2, CommandKind.CLOSE),
            Action(3, CommandKind.DOWN),
        ]

    def test_two_cars_on_one_floor_split_the_queue(self, dispatcher, observe, make_passenger):
        building = Building.create(3, ElevatorConstraints(max_floor=25, max_carrying=1))
        p1, p2 = make_passenger(1, 4, 9), make_passenger(2, 4, 11)
        observe(building, [(0, 4, OPEN, []), (2, 4, OPEN, [])], [p1, p2])

        actions = dispatcher.dispatch(building)

        assert actions == [Action(0, CommandKind.ENTER, (1,)), Action(2, CommandKind.ENTER, (2,))]
        assert building.calls.peek(4) == []

    def test_is_deterministic(self, observe, constraints, make_passenger):
        calls = [make_passenger(i, 1 + i % 12, 25 - i % 12) for i in range(30)]
        results = []
        for _ in range(2):
            building = Building.create(4, constraints)
            observe(building, [(i, 1 + 6 * i, STOPPED, []) for i in range(4)], calls)
            results.append(ScanDispatcher().dispatch(building))
        assert results[0] == results[1]

    def test_empty_tick_yields_nothing_but_moves(self, dispatcher, observe, constraints):
        building = Building.create(2, constraints)
        observe(building, [(0, 1, STOPPED, []), (1, 1, STOPPED, [])])
        # Car 1 sweeps down from the bottom: it flips instead of moving.
        assert dispatcher.dispatch(building) == [Action(0, CommandKind.UP)]
        assert building.assign(1) is Direction.UP


class TestSkippingBrokenElevators:
    def test_unknown_elevator_is_skipped(self, dispatcher, building, observe, caplog):
        with caplog.at_level(logging.WARNING):
            observe(building, [(0, 5, STOPPED, []), (7, 5, STOPPED, [])])
            actions = dispatcher.dispatch(building)

        assert actions == [Action(0, CommandKind.UP)]
        assert "no sweep direction" in caplog.text

    def test_overloaded_elevator_is_skipped(self, dispatcher, observe, make_passenger, caplog):
        building = Building.create(2, ElevatorConstraints(max_floor=25, max_carrying=2))
        riders = [make_passenger(i, 1, 9) for i in range(3)]
        with caplog.at_level(logging.WARNING):
            observe(building, [(0, 5, MOVING_UP, riders), (1, 5, MOVING_DOWN, [])])
            actions = dispatcher.dispatch(building)

        assert actions == [Action(1, CommandKind.DOWN)]
        assert "over capacity" in caplog.text

    def test_out_of_range_floor_is_skipped(self, dispatcher, building, observe):
        observe(building, [(0, 30, MOVING_UP, [])])
        assert dispatcher.dispatch(building) == []


class TestRegistry:
    def test_scan_by_name(self):
        assert isinstance(get_dispatcher("SCAN"), ScanDispatcher)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Available: scan"):
            get_dispatcher("look")
