"""
Building dispatcher: lifecycle, request queues, distribution and shutdown.

Unless stated otherwise the building has 11 floors, 8 cars and capacity 3,
with car ids starting at 0.
"""

import pytest

from simulator.core.building import Building
from simulator.core.car import Car
from simulator.core.exceptions import IllegalStateError, InvalidArgumentError
from simulator.core.identity import CarIdAllocator
from simulator.core.request import Direction, Request
from simulator.core.states import CarState, SystemStatus


def step_n(building, n):
    for _ in range(n):
        building.trigger_elevator_step()


def reports(building):
    return building.get_elevator_system_status().elevator_reports


# --- Construction ---

@pytest.mark.parametrize("floors, elevators, capacity", [
    (1, 8, 3),
    (11, 0, 3),
    (11, 8, 0),
    (-1, -1, -1),
])
def test_invalid_building_sizes(floors, elevators, capacity):
    with pytest.raises(InvalidArgumentError):
        Building(floors, elevators, capacity, id_allocator=CarIdAllocator())


def test_new_building_is_out_of_service(building):
    status = building.get_elevator_system_status()
    assert status.system_status is SystemStatus.OUT_OF_SERVICE
    assert status.num_floors == 11
    assert status.num_elevators == 8
    assert status.elevator_capacity == 3
    assert len(status.elevator_reports) == 8
    for report in status.elevator_reports:
        assert report.current_floor == 0
        assert report.out_of_service
    assert status.up_requests == ()
    assert status.down_requests == ()


def test_car_ids_follow_creation_order(allocator):
    first = Building(3, 2, 1, id_allocator=allocator)
    second = Building(3, 2, 1, id_allocator=allocator)
    assert [car.car_id for car in first.elevators] == [0, 1]
    assert [car.car_id for car in second.elevators] == [2, 3]


def test_default_allocator_never_reuses_ids():
    first = Building(3, 2, 1)
    second = Building(3, 2, 1)
    assert min(car.car_id for car in second.elevators) > max(car.car_id for car in first.elevators)


# --- Lifecycle ---

def test_start_puts_every_car_in_ground_dwell(building):
    assert building.start_elevator_system() is True
    assert building.system_status is SystemStatus.RUNNING
    for report in reports(building):
        assert report.direction is Direction.UP
        assert report.current_floor == 0
        assert report.door_closed
        assert report.wait_timer == 5
        assert not report.out_of_service


def test_start_while_running_is_a_no_op(building):
    building.start_elevator_system()
    building.trigger_elevator_step()
    before = building.get_elevator_system_status()
    assert building.start_elevator_system() is False
    assert building.get_elevator_system_status() == before


def test_start_while_stopping_is_rejected(building):
    building.start_elevator_system()
    step_n(building, 6)
    building.stop_elevator_system()
    assert building.system_status is SystemStatus.STOPPING
    with pytest.raises(IllegalStateError):
        building.start_elevator_system()


def test_step_while_out_of_service_does_nothing(building):
    before = building.get_elevator_system_status()
    step_n(building, 3)
    assert building.get_elevator_system_status() == before
    assert building.tick == 0


def test_idle_cars_leave_ground_after_dwell(building):
    building.start_elevator_system()
    step_n(building, 6)
    assert building.tick == 6
    for report in reports(building):
        assert report.current_floor == 1


def test_restart_after_shutdown(building):
    building.start_elevator_system()
    step_n(building, 6)
    building.stop_elevator_system()
    step_n(building, 5)
    assert building.system_status is SystemStatus.OUT_OF_SERVICE

    assert building.start_elevator_system() is True
    for report in reports(building):
        assert report.state is CarState.WAITING_AT_GROUND
        assert report.wait_timer == 5


# --- Requests ---

@pytest.mark.parametrize("request_, message", [
    (None, "Request cannot be null"),
    (Request(11, 2), "Start floor must be between 0 and 10"),
    (Request(-1, 2), "Start floor must be between 0 and 10"),
    (Request(2, 11), "End floor must be between 0 and 10"),
    (Request(3, 3), "Start floor and end floor cannot be the same"),
])
@pytest.mark.parametrize("started", [False, True])
def test_malformed_requests_are_rejected(building, request_, message, started):
    if started:
        building.start_elevator_system()
    with pytest.raises(InvalidArgumentError, match=message):
        building.add_request(request_)


def test_request_rejected_while_out_of_service(building):
    with pytest.raises(IllegalStateError):
        building.add_request(Request(0, 2))
    status = building.get_elevator_system_status()
    assert status.up_requests == ()


def test_request_rejected_while_stopping(building):
    building.start_elevator_system()
    step_n(building, 6)
    building.stop_elevator_system()
    with pytest.raises(IllegalStateError):
        building.add_request(Request(0, 2))


def test_requests_are_queued_by_direction(building):
    building.start_elevator_system()
    assert building.add_request(Request(1, 5)) is True
    building.add_request(Request(9, 1))
    building.add_request(Request(0, 4))

    status = building.get_elevator_system_status()
    assert status.up_requests == (Request(1, 5), Request(0, 4))
    assert status.down_requests == (Request(9, 1),)


def test_clear_requests(building):
    building.start_elevator_system()
    building.add_request(Request(1, 5))
    building.add_request(Request(9, 1))
    building.clear_requests()
    status = building.get_elevator_system_status()
    assert status.up_requests == ()
    assert status.down_requests == ()


def test_up_request_is_served(building):
    building.start_elevator_system()
    building.add_request(Request(0, 2))
    step_n(building, 6)
    assert reports(building)[0].current_floor == 2


def test_down_request_is_served_from_top(building):
    building.start_elevator_system()
    building.add_request(Request(10, 8))
    step_n(building, 27)
    car = reports(building)[0]
    assert car.current_floor == 8
    assert car.door_closed

    building.trigger_elevator_step()
    car = reports(building)[0]
    assert car.current_floor == 8
    assert not car.door_closed


def test_single_car_building_serves_request():
    building = Building(3, 1, 3, id_allocator=CarIdAllocator())
    building.start_elevator_system()
    building.add_request(Request(1, 2))
    step_n(building, 6)
    assert reports(building)[0].current_floor == 2


def test_queued_requests_are_handed_out_before_cars_move():
    building = Building(3, 1, 3, id_allocator=CarIdAllocator())
    building.start_elevator_system()
    building.add_request(Request(0, 1))
    building.trigger_elevator_step()
    car = reports(building)[0]
    assert car.current_floor == 0
    assert car.state is CarState.DOOR_OPEN


def test_batches_respect_capacity_in_fleet_order():
    building = Building(11, 2, 2, id_allocator=CarIdAllocator())
    building.start_elevator_system()
    for start, end in [(1, 2), (1, 3), (2, 4), (3, 5), (4, 6)]:
        building.add_request(Request(start, end))

    building.trigger_elevator_step()
    status = building.get_elevator_system_status()
    assert status.elevator_reports[0].requested_floors == [1, 2, 3]
    assert status.elevator_reports[1].requested_floors == [2, 3, 4, 5]
    assert status.up_requests == (Request(4, 6),)


class RefusingCar(Car):
    def accept_batch(self, requests):
        raise IllegalStateError("Elevator is not accepting requests")


def test_refused_batch_stays_queued():
    building = Building(
        3, 2, 3, id_allocator=CarIdAllocator(),
        car_factory=lambda car_id, floors, capacity, clock: RefusingCar(car_id, floors, capacity, clock=clock))
    building.start_elevator_system()
    building.add_request(Request(0, 1))
    building.trigger_elevator_step()
    assert building.get_elevator_system_status().up_requests == (Request(0, 1),)


# --- Out of service ---

def test_take_elevator_out_of_service(building):
    building.start_elevator_system()
    car_id = building.elevators[0].car_id
    building.take_elevator_out_of_service(car_id)

    status = reports(building)
    assert status[0].out_of_service
    assert str(status[0]) == "Out of Service[Floor 0]"
    assert not any(report.out_of_service for report in status[1:])


def test_unknown_elevator_id_is_ignored(building):
    building.start_elevator_system()
    building.take_elevator_out_of_service(999)
    assert not any(report.out_of_service for report in reports(building))


def test_take_all_elevators_out_of_service(building):
    building.start_elevator_system()
    building.take_all_elevators_out_of_service()
    assert all(report.out_of_service for report in reports(building))


def test_all_out_of_service_mid_trip_returns_to_ground():
    building = Building(3, 2, 3, id_allocator=CarIdAllocator())
    building.start_elevator_system()
    building.add_request(Request(1, 2))
    step_n(building, 7)
    assert reports(building)[0].current_floor == 2
    assert not reports(building)[0].door_closed

    building.take_all_elevators_out_of_service()
    step_n(building, 5)
    for report in reports(building):
        assert report.current_floor == 0
        assert report.out_of_service


# --- Shutdown ---

def test_stop_returns_idle_cars_to_ground():
    building = Building(3, 2, 3, id_allocator=CarIdAllocator())
    building.start_elevator_system()
    step_n(building, 6)
    building.stop_elevator_system()
    step_n(building, 5)
    for report in reports(building):
        assert report.current_floor == 0
        assert report.out_of_service
    assert building.system_status is SystemStatus.OUT_OF_SERVICE


def test_stop_returns_busy_cars_to_ground():
    building = Building(3, 2, 3, id_allocator=CarIdAllocator())
    building.start_elevator_system()
    building.add_request(Request(1, 2))
    step_n(building, 6)
    building.stop_elevator_system()
    step_n(building, 10)
    for report in reports(building):
        assert report.current_floor == 0
    assert building.system_status is SystemStatus.OUT_OF_SERVICE


def test_stop_is_idempotent():
    once = Building(11, 8, 3, id_allocator=CarIdAllocator())
    twice = Building(11, 8, 3, id_allocator=CarIdAllocator())
    for building in (once, twice):
        building.start_elevator_system()
        step_n(building, 8)
    once.stop_elevator_system()
    twice.stop_elevator_system()
    twice.stop_elevator_system()
    assert once.get_elevator_system_status() == twice.get_elevator_system_status()


def test_stop_while_out_of_service_does_nothing(building):
    building.stop_elevator_system()
    assert building.system_status is SystemStatus.OUT_OF_SERVICE


def test_stop_drops_queue_but_serves_stops_below():
    building = Building(5, 1, 3, id_allocator=CarIdAllocator())
    building.start_elevator_system()
    step_n(building, 9)
    assert reports(building)[0].current_floor == 4

    building.add_request(Request(4, 1))
    step_n(building, 11)
    assert reports(building)[0].current_floor == 3

    building.add_request(Request(0, 2))
    building.stop_elevator_system()
    status = building.get_elevator_system_status()
    assert status.up_requests == ()
    assert status.elevator_reports[0].requested_floors == [1]

    opened_at = []
    for _ in range(20):
        building.trigger_elevator_step()
        car = reports(building)[0]
        if not car.door_closed:
            opened_at.append(car.current_floor)
        if building.system_status is SystemStatus.OUT_OF_SERVICE:
            break
    assert set(opened_at) == {1}
    assert building.system_status is SystemStatus.OUT_OF_SERVICE


def test_stop_keeps_drop_off_above_the_car():
    building = Building(3, 1, 3, id_allocator=CarIdAllocator())
    building.start_elevator_system()
    building.add_request(Request(1, 2))
    step_n(building, 6)
    assert reports(building)[0].current_floor == 2

    building.add_request(Request(0, 1))
    building.stop_elevator_system()
    status = building.get_elevator_system_status()
    assert status.up_requests == ()
    assert status.elevator_reports[0].requested_floors == [2]

    opened_at = []
    for _ in range(12):
        building.trigger_elevator_step()
        car = reports(building)[0]
        if not car.door_closed:
            opened_at.append(car.current_floor)
    assert 2 in opened_at
    assert building.system_status is SystemStatus.OUT_OF_SERVICE


def test_stop_lets_top_dwell_run_out():
    building = Building(3, 1, 3, id_allocator=CarIdAllocator())
    building.start_elevator_system()
    step_n(building, 8)
    assert reports(building)[0].state is CarState.WAITING_AT_TOP

    building.stop_elevator_system()
    building.trigger_elevator_step()
    car = reports(building)[0]
    assert car.current_floor == 2
    assert car.state is CarState.WAITING_AT_TOP

    step_n(building, 5)
    assert building.system_status is SystemStatus.STOPPING
    building.trigger_elevator_step()
    assert reports(building)[0].current_floor == 0
    assert building.system_status is SystemStatus.OUT_OF_SERVICE


def test_shutdown_completes_exactly_when_all_cars_are_home(building):
    building.start_elevator_system()
    building.add_request(Request(0, 3))
    step_n(building, 8)
    building.stop_elevator_system()

    for _ in range(50):
        building.trigger_elevator_step()
        all_home = all(report.current_floor == 0 for report in reports(building))
        assert all_home == (building.system_status is SystemStatus.OUT_OF_SERVICE)
    assert building.system_status is SystemStatus.OUT_OF_SERVICE


def test_floors_and_doors_stay_consistent_under_load(building):
    building.start_elevator_system()
    for tick in range(120):
        if tick % 3 == 0:
            building.add_request(Request(tick % 11, (tick + 4) % 11))
        if tick % 7 == 0:
            building.add_request(Request(10, tick % 10))
        building.trigger_elevator_step()
        for report in reports(building):
            assert 0 <= report.current_floor <= 10
            if report.state is CarState.MOVING:
                assert report.door_closed


# --- Status printing ---

def test_print_statuses_after_start(building, capsys):
    building.start_elevator_system()
    capsys.readouterr()
    building.print_elevator_statuses()

    expected = "Current Elevator Statuses:\n"
    for index in range(8):
        expected += f"Elevator {index}: Waiting[Floor 0, Time 5]\n"
    expected += "Up Requests: None\nDown Requests: None\n"
    assert capsys.readouterr().out == expected


def test_print_statuses_with_request(building, capsys):
    building.start_elevator_system()
    building.add_request(Request(1, 2))
    step_n(building, 6)
    capsys.readouterr()
    building.print_elevator_statuses()

    expected = "Current Elevator Statuses:\n"
    expected += "Elevator 0: [2|^|C  ]< -- --  2 -- -- -- -- -- -- -- -->\n"
    for index in range(1, 8):
        expected += f"Elevator {index}: [1|^|C  ]< -- -- -- -- -- -- -- -- -- -- -->\n"
    expected += "Up Requests: None\nDown Requests: None\n"
    assert capsys.readouterr().out == expected


def test_print_statuses_with_queued_requests(building, capsys):
    building.start_elevator_system()
    step_n(building, 6)
    building.add_request(Request(1, 5))
    building.add_request(Request(9, 1))
    building.add_request(Request(10, 8))
    capsys.readouterr()
    building.print_elevator_statuses()

    out = capsys.readouterr().out
    assert "Up Requests: [1->5] \n" in out
    assert "Down Requests: [9->1] [10->8] \n" in out
