"""Integration tests for the simulation session."""

import asyncio

import pytest

from canallock.config import LockConfig
from canallock.core.events import Event, EventType
from canallock.core.session import SimulationSession
from canallock.core.states import GateState, LockSide, ShipMove, ShipPosition
from canallock.exceptions import ConfigurationError
from canallock.simulator.constants import PhysicalConstants

RISE = 70000 / 27500


class TestDefaultState:
    """Test the state a new session starts in."""

    @pytest.mark.asyncio
    async def test_initial_snapshot(self, session: SimulationSession) -> None:
        snap = session.snapshot()

        assert snap.baseline_chamber_level == 10.0
        assert snap.displayed_chamber_level == 10.0
        assert snap.upper_level == 26.0
        assert snap.lower_level == 10.0
        assert snap.ship_position == ShipPosition.UPPER
        assert snap.ship_level_rise == 0.0
        assert snap.effective_chamber_area == 33500.0
        assert snap.upper_gate == GateState.CLOSED
        assert snap.lower_gate == GateState.CLOSED
        assert snap.upper_valve == 0.0
        assert snap.time_scale == 10.0
        assert not snap.is_running
        assert snap.allowed_moves == frozenset()

    @pytest.mark.asyncio
    async def test_initial_gate_forces(self, session: SimulationSession) -> None:
        snap = session.snapshot()

        assert snap.upper_gate_force.head_difference == pytest.approx(16.0)
        assert snap.upper_gate_force.pressure_kpa == pytest.approx(78.48)
        assert snap.upper_gate_force.force_kn == pytest.approx(3924.0)
        assert snap.lower_gate_force.force_kn == 0.0

    @pytest.mark.asyncio
    async def test_snapshot_serializes(self, session: SimulationSession) -> None:
        data = session.snapshot().to_dict()

        assert data["ship_position"] == "upper"
        assert data["upper_gate"] == "closed"
        assert data["upper_gate_force"]["force"] == pytest.approx(3924.0)
        assert data["allowed_moves"] == []
        assert data["ship_area_ratio"] == pytest.approx(6000 / 33500 * 100)


class TestRunningSimulation:
    """Test time advancing through the session."""

    @pytest.mark.asyncio
    async def test_paused_session_does_not_move(
        self, session: SimulationSession, fake_time
    ) -> None:
        await session.set_upper_valve(100)
        fake_time.advance(10.0)
        assert await session.step() == 0.0
        assert session.chamber.baseline_level == 10.0

    @pytest.mark.asyncio
    async def test_one_virtual_second_of_filling(
        self, session: SimulationSession, fake_time
    ) -> None:
        await session.set_upper_valve(100)
        await session.start()

        fake_time.advance(0.1)
        dt = await session.step()

        assert dt == pytest.approx(1.0)
        assert session.chamber.baseline_level == pytest.approx(10.0 + 100 / 33500)
        assert session.clock.elapsed == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_pause_resume_without_jump(
        self, session: SimulationSession, fake_time
    ) -> None:
        await session.start()
        fake_time.advance(1.0)
        await session.step()
        await session.pause()

        fake_time.advance(1000.0)
        assert await session.step() == 0.0

        await session.start()
        fake_time.advance(1.0)
        await session.step()
        assert session.clock.elapsed == pytest.approx(20.0)

    @pytest.mark.asyncio
    async def test_time_scale_clamped(self, session: SimulationSession) -> None:
        assert await session.set_time_scale(250) == 100.0
        assert await session.set_time_scale(0) == 1.0

    @pytest.mark.asyncio
    async def test_real_ticker_advances(self) -> None:
        config = LockConfig()
        config.frame_interval = 0.001
        session = SimulationSession(config)
        await session.set_upper_valve(100)

        await session.start()
        await asyncio.sleep(0.05)
        await session.pause()

        assert session.clock.elapsed > 0.0
        assert session.chamber.baseline_level > 10.0
        assert not session.is_running

    @pytest.mark.asyncio
    async def test_start_twice(self, session: SimulationSession) -> None:
        events: list[Event] = []

        async def listener(event: Event) -> None:
            events.append(event)

        session.add_listener(listener)
        await session.start()
        await session.start()

        started = [e for e in events if e.type == EventType.SIMULATION_STARTED]
        assert len(started) == 1


class TestDownboundLockage:
    """Test a complete downbound lockage, upper basin to lower basin."""

    @pytest.mark.asyncio
    async def test_full_lockage(self, session: SimulationSession, fake_time) -> None:
        await session.start()

        # Fill the chamber to the upper level
        await session.set_upper_valve(100)
        fake_time.advance(600.0)
        await session.step()
        assert session.chamber.baseline_level == pytest.approx(26.0)
        assert session.gate_force(LockSide.UPPER).force_kn == pytest.approx(0.0)
        await session.set_upper_valve(0)

        # Enter
        await session.toggle_upper_gate()
        assert await session.move_ship(ShipMove.TO_CHAMBER)
        assert session.chamber.baseline_level == pytest.approx(26.0 - RISE)
        assert session.displayed_chamber_level() == pytest.approx(26.0)
        await session.toggle_upper_gate()

        # Drain to the lower level
        await session.set_lower_valve(100)
        fake_time.advance(1000.0)
        await session.step()
        assert session.displayed_chamber_level() == pytest.approx(10.0)
        assert session.chamber.baseline_level == pytest.approx(10.0 - RISE)
        assert session.equalization_baseline(LockSide.LOWER) == pytest.approx(
            10.0 - RISE
        )
        await session.set_lower_valve(0)

        # Exit
        await session.toggle_lower_gate()
        assert await session.move_ship("to_lower")
        assert session.ship.position == ShipPosition.LOWER
        assert session.chamber.baseline_level == pytest.approx(10.0)
        assert session.displayed_chamber_level() == pytest.approx(10.0)

    @pytest.mark.asyncio
    async def test_gate_closed_blocks_move(self, session: SimulationSession) -> None:
        assert not await session.move_ship(ShipMove.TO_CHAMBER)
        assert session.ship.position == ShipPosition.UPPER
        assert session.chamber.baseline_level == 10.0

    @pytest.mark.asyncio
    async def test_string_moves(self, session: SimulationSession) -> None:
        await session.toggle_upper_gate()
        assert await session.move_ship("toChamber")
        assert await session.move_ship("TO_UPPER")
        assert not await session.move_ship("sideways")
        assert session.ship.position == ShipPosition.UPPER


class TestReset:
    """Test restoring the initial state."""

    @pytest.mark.asyncio
    async def test_reset_matches_fresh_session(
        self, session: SimulationSession, test_config: LockConfig, fake_time
    ) -> None:
        await session.start()
        await session.set_upper_valve(60)
        await session.toggle_upper_gate()
        await session.move_ship(ShipMove.TO_CHAMBER)
        await session.set_ship_displacement(50000)
        await session.set_ship_area(4000)
        await session.set_basin_levels(upper=20, lower=5)
        await session.set_time_scale(70)
        fake_time.advance(5.0)
        await session.step()

        await session.reset()

        fresh = SimulationSession(test_config, time_source=fake_time)
        assert session.snapshot().to_dict() == fresh.snapshot().to_dict()
        assert not session.is_running


class TestEvents:
    """Test event emission to listeners."""

    @pytest.mark.asyncio
    async def test_command_events(self, session: SimulationSession) -> None:
        events: list[Event] = []

        async def listener(event: Event) -> None:
            events.append(event)

        session.add_listener(listener)
        await session.toggle_upper_gate()
        await session.move_ship(ShipMove.TO_CHAMBER)
        await session.set_lower_valve(40)

        assert [e.type for e in events] == [
            EventType.GATE_TOGGLED,
            EventType.SHIP_MOVED,
            EventType.VALVE_CHANGED,
        ]
        assert events[1].data == {"from": "upper", "to": "chamber"}
        assert events[2].data == {"valve": "lower", "opening": 40.0}

    @pytest.mark.asyncio
    async def test_rejected_move_emits_nothing(
        self, session: SimulationSession
    ) -> None:
        events: list[Event] = []

        async def listener(event: Event) -> None:
            events.append(event)

        session.add_listener(listener)
        await session.move_ship(ShipMove.TO_CHAMBER)
        assert events == []

    @pytest.mark.asyncio
    async def test_failing_listener_tolerated(
        self, session: SimulationSession
    ) -> None:
        received: list[Event] = []

        async def broken(event: Event) -> None:
            raise RuntimeError("listener failed")

        async def listener(event: Event) -> None:
            received.append(event)

        session.add_listener(broken)
        session.add_listener(listener)
        assert await session.toggle_lower_gate() == GateState.OPEN
        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_remove_listener(self, session: SimulationSession) -> None:
        events: list[Event] = []

        async def listener(event: Event) -> None:
            events.append(event)

        session.add_listener(listener)
        session.remove_listener(listener)
        await session.toggle_upper_gate()
        assert events == []

    @pytest.mark.asyncio
    async def test_integration_error_pauses(
        self, session: SimulationSession, fake_time
    ) -> None:
        events: list[Event] = []

        async def listener(event: Event) -> None:
            events.append(event)

        session.add_listener(listener)
        session.ship.position = ShipPosition.CHAMBER
        session.ship.footprint_area = 40000.0
        await session.start()
        fake_time.advance(1.0)
        await session.step()

        assert not session.is_running
        errors = [e for e in events if e.type == EventType.ERROR]
        assert len(errors) == 1
        assert errors[0].data["error_type"] == "configuration"


class TestShipParameters:
    """Test ship parameter changes through the session."""

    @pytest.mark.asyncio
    async def test_parameters_clamped(self, session: SimulationSession) -> None:
        assert await session.set_ship_displacement(1) == 30000.0
        assert await session.set_ship_area(1e6) == 10000.0

    @pytest.mark.asyncio
    async def test_basin_levels_clamped(self, session: SimulationSession) -> None:
        basins = await session.set_basin_levels(upper=45, lower=-3)
        assert basins.upper == 30.0
        assert basins.lower == 0.0

    @pytest.mark.asyncio
    async def test_rise_only_in_chamber(self, session: SimulationSession) -> None:
        assert session.ship_level_rise() == 0.0
        await session.toggle_upper_gate()
        await session.move_ship(ShipMove.TO_CHAMBER)
        assert session.ship_level_rise() == pytest.approx(RISE)
        assert session.effective_chamber_area() == 27500.0


class TestConfigurationChecks:
    """Test configuration checks at session construction."""

    def test_initial_level_above_chamber_rejected(self) -> None:
        config = LockConfig()
        config.initial.chamber_level = 35.0
        with pytest.raises(ConfigurationError):
            SimulationSession(config)

    def test_ship_that_does_not_fit_rejected(self) -> None:
        config = LockConfig(constants=PhysicalConstants(chamber_area=5000))
        with pytest.raises(ConfigurationError):
            SimulationSession(config)


class TestPauseFromFrame:
    """Test pausing from inside a simulation frame."""

    @pytest.mark.asyncio
    async def test_suspending_listener_receives_pause(self) -> None:
        config = LockConfig()
        config.frame_interval = 0.001
        session = SimulationSession(config)
        events: list[Event] = []

        async def listener(event: Event) -> None:
            await asyncio.sleep(0)
            events.append(event)

        session.add_listener(listener)
        session.ship.position = ShipPosition.CHAMBER
        session.ship.footprint_area = 40000.0

        await session.start()
        await asyncio.sleep(0.05)

        types = [e.type for e in events]
        assert EventType.ERROR in types
        assert EventType.SIMULATION_PAUSED in types
        assert types.index(EventType.ERROR) < types.index(EventType.SIMULATION_PAUSED)
        assert not session.is_running
        await session.pause()
