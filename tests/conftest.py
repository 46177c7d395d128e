"""Pytest fixtures for canal lock tests."""

import pytest

from canallock.config import LockConfig
from canallock.core.controller import LockController
from canallock.core.lock_state import BasinLevels, ChamberState, ShipState
from canallock.core.session import SimulationSession
from canallock.simulator.clock import SimulationClock
from canallock.simulator.constants import PhysicalConstants
from canallock.simulator.level_integrator import LevelIntegrator


class FakeTime:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_time() -> FakeTime:
    """Wall clock that only moves when told to."""
    return FakeTime()


@pytest.fixture
def constants() -> PhysicalConstants:
    """Default physical constants."""
    return PhysicalConstants()


@pytest.fixture
def chamber() -> ChamberState:
    """Chamber at 10 m with valves shut and gates closed."""
    return ChamberState()


@pytest.fixture
def ship() -> ShipState:
    """Default ship waiting in the upper basin."""
    return ShipState()


@pytest.fixture
def basins() -> BasinLevels:
    """Upper basin at 26 m, lower basin at 10 m."""
    return BasinLevels()


@pytest.fixture
def integrator(
    chamber: ChamberState,
    ship: ShipState,
    basins: BasinLevels,
    constants: PhysicalConstants,
) -> LevelIntegrator:
    """Level integrator over the default lock state."""
    return LevelIntegrator(chamber, ship, basins, constants)


@pytest.fixture
def controller(
    chamber: ChamberState,
    ship: ShipState,
    constants: PhysicalConstants,
) -> LockController:
    """Lock controller over the default lock state."""
    return LockController(chamber, ship, constants)


@pytest.fixture
def clock(fake_time: FakeTime) -> SimulationClock:
    """Clock at 1x driven by the fake wall clock."""
    return SimulationClock(time_scale=1.0, time_source=fake_time)


@pytest.fixture
def test_config() -> LockConfig:
    """Default configuration with a frame interval long enough that the
    background ticker never fires during a test."""
    config = LockConfig()
    config.frame_interval = 3600.0
    config.broadcast_interval = 3600.0
    return config


@pytest.fixture
async def session(test_config: LockConfig, fake_time: FakeTime) -> SimulationSession:
    """Session in its default state, stepped manually via the fake clock."""
    session = SimulationSession(test_config, time_source=fake_time)
    yield session
    await session.pause()
