"""
Shared pytest fixtures for all tests.

Provides in-memory implementations of the scheduling ports, a fixed clock,
seeded reference ids and the PostgreSQL fixtures used by integration tests.
"""

import copy
import os
from collections.abc import AsyncGenerator, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, time

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from agenda.core.domain import ConcurrentModificationException, SlotAlreadyTakenException
from agenda.domains.scheduling.application.ports import (
    IAppointmentRepository,
    IClock,
    IDirectory,
    IScheduleWindowRepository,
    ISlotRepository,
    IUnitOfWork,
)
from agenda.domains.scheduling.domain.entities import Appointment, RecurringSlot, ScheduleWindow
from agenda.domains.scheduling.domain.value_objects import DayOfWeek, TypeAvailability, format_hour

# Ensure test environment
os.environ.setdefault("ENVIRONMENT", "test")

PRACTITIONER_ID = "5a1c9f5e-0d2b-4c1e-9a7f-1b2c3d4e5f60"
OTHER_PRACTITIONER_ID = "6b2d0a6f-1e3c-4d2f-8b80-2c3d4e5f6071"
PATIENT_ID = "7c3e1b70-2f4d-4e30-9c91-3d4e5f607182"
OTHER_PATIENT_ID = "8d4f2c81-3a5e-4f41-ad02-4e5f60718293"
BRANCH_ID = "9e503d92-4b6f-4052-be13-5f60718293a4"
LOCATION_ID = "af614ea3-5c70-4163-8f24-60718293a4b5"

# 2030-01-07 is a Monday
MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)
NEXT_MONDAY = date(2030, 1, 14)


# ============================================================================
# IN-MEMORY STORE
# ============================================================================


@dataclass
class SchedulingStore:
    """Committed state shared by every in-memory unit of work."""

    practitioners: set[str] = field(default_factory=set)
    patients: set[str] = field(default_factory=set)
    branches: set[str] = field(default_factory=set)
    locations: set[str] = field(default_factory=set)
    windows: dict[str, ScheduleWindow] = field(default_factory=dict)
    slots: dict[str, RecurringSlot] = field(default_factory=dict)
    appointments: dict[str, Appointment] = field(default_factory=dict)
    appointment_types: dict[str, list[TypeAvailability]] = field(default_factory=dict)
    practitioner_locks: list[str] = field(default_factory=list)
    commits: int = 0

    def add_window(self, window_id: str, opening: time, close: time, overtime: time | None = None) -> ScheduleWindow:
        window = ScheduleWindow(id=window_id, opening_hour=opening, close_hour=close, overtime_start_hour=overtime)
        self.windows[window_id] = window
        return window

    def add_slot(self, slot: RecurringSlot) -> RecurringSlot:
        self.slots[slot.id] = slot
        return slot

    def active_hours(self, practitioner_id: str, on: date) -> list[str]:
        return sorted(
            format_hour(a.hour)
            for a in self.appointments.values()
            if a.practitioner_id == practitioner_id and a.appointment_date == on and a.is_active
        )


class InMemoryDirectory(IDirectory):
    def __init__(self, store: SchedulingStore):
        self._store = store

    async def practitioner_exists(self, practitioner_id: str) -> bool:
        return practitioner_id in self._store.practitioners

    async def patient_exists(self, patient_id: str) -> bool:
        return patient_id in self._store.patients

    async def branch_exists(self, branch_id: str) -> bool:
        return branch_id in self._store.branches

    async def location_exists(self, location_id: str) -> bool:
        return location_id in self._store.locations

    async def lock_practitioner(self, practitioner_id: str) -> bool:
        self._store.practitioner_locks.append(practitioner_id)
        return practitioner_id in self._store.practitioners

    async def find_type_availabilities(self, appointment_type_id: str) -> list[TypeAvailability] | None:
        availabilities = self._store.appointment_types.get(appointment_type_id)
        return list(availabilities) if availabilities is not None else None


class InMemoryScheduleWindowRepository(IScheduleWindowRepository):
    def __init__(self, windows: dict[str, ScheduleWindow]):
        self._windows = windows

    async def find_by_ids(self, schedule_ids: Iterable[str]) -> dict[str, ScheduleWindow]:
        return {i: copy.deepcopy(self._windows[i]) for i in schedule_ids if i in self._windows}

    async def find_or_create(
        self,
        opening_hour: time,
        close_hour: time,
        overtime_start_hour: time | None = None,
    ) -> ScheduleWindow:
        bounds = (opening_hour, close_hour, overtime_start_hour)
        for window in self._windows.values():
            if window.bounds == bounds:
                return copy.deepcopy(window)
        window = ScheduleWindow(
            id=f"window-{len(self._windows) + 1}",
            opening_hour=opening_hour,
            close_hour=close_hour,
            overtime_start_hour=overtime_start_hour,
        )
        self._windows[window.id] = window
        return copy.deepcopy(window)


class InMemorySlotRepository(ISlotRepository):
    def __init__(self, slots: dict[str, RecurringSlot]):
        self._slots = slots

    async def find_by_id(self, slot_id: str) -> RecurringSlot | None:
        slot = self._slots.get(slot_id)
        return copy.deepcopy(slot) if slot else None

    async def find_by_practitioner_and_day(
        self,
        practitioner_id: str,
        day_of_week: DayOfWeek,
        include_unavailable: bool = False,
    ) -> list[RecurringSlot]:
        return [
            copy.deepcopy(slot)
            for slot in self._slots.values()
            if slot.practitioner_id == practitioner_id
            and slot.day_of_week == day_of_week
            and not slot.is_deleted()
            and (include_unavailable or not slot.unavailable)
        ]

    async def add(self, slot: RecurringSlot) -> RecurringSlot:
        self._slots[slot.id] = copy.deepcopy(slot)
        return slot

    async def update(self, slot: RecurringSlot) -> RecurringSlot:
        self._slots[slot.id] = copy.deepcopy(slot)
        return slot


class InMemoryAppointmentRepository(IAppointmentRepository):
    """Enforces one active appointment per practitioner, date and hour, like the partial unique index."""

    def __init__(self, appointments: dict[str, Appointment]):
        self._appointments = appointments
        self.dirty: set[str] = set()

    async def find_by_id(self, appointment_id: str) -> Appointment | None:
        appointment = self._appointments.get(appointment_id)
        return copy.deepcopy(appointment) if appointment else None

    async def find_by_id_for_update(self, appointment_id: str) -> Appointment | None:
        return await self.find_by_id(appointment_id)

    async def find_booked_hours(self, practitioner_id: str, appointment_date: date) -> list[time]:
        return sorted(
            a.hour
            for a in self._appointments.values()
            if a.practitioner_id == practitioner_id and a.appointment_date == appointment_date and a.is_active
        )

    async def exists_active_at(
        self,
        practitioner_id: str,
        appointment_date: date,
        hour: time,
        exclude_appointment_id: str | None = None,
    ) -> bool:
        return any(
            a.practitioner_id == practitioner_id
            and a.appointment_date == appointment_date
            and a.hour == hour
            and a.is_active
            and a.id != exclude_appointment_id
            for a in self._appointments.values()
        )

    async def add(self, appointment: Appointment) -> Appointment:
        self._check_unique(appointment)
        self._appointments[appointment.id] = copy.deepcopy(appointment)
        self.dirty.add(appointment.id)
        return appointment

    async def update(self, appointment: Appointment) -> Appointment:
        self._check_unique(appointment)
        self._appointments[appointment.id] = copy.deepcopy(appointment)
        self.dirty.add(appointment.id)
        return appointment

    def _check_unique(self, appointment: Appointment) -> None:
        if not appointment.is_active:
            return
        for other in self._appointments.values():
            if (
                other.id != appointment.id
                and other.is_active
                and other.practitioner_id == appointment.practitioner_id
                and other.appointment_date == appointment.appointment_date
                and other.hour == appointment.hour
            ):
                raise SlotAlreadyTakenException(
                    appointment.practitioner_id,
                    appointment.appointment_date.isoformat(),
                    format_hour(appointment.hour),
                )


class InMemoryUnitOfWork(IUnitOfWork):
    """
    Works on a private copy of the store; commit publishes it, anything else discards it.

    Commit rejects a write to an appointment whose committed version moved
    since this unit of work started, like the mapper's version counter.
    """

    def __init__(self, store: SchedulingStore):
        self._store = store
        self._windows: dict[str, ScheduleWindow] = {}
        self._slots: dict[str, RecurringSlot] = {}
        self._appointments: dict[str, Appointment] = {}
        self._loaded_versions: dict[str, int] = {}
        self.committed = False
        self.rolled_back = False

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        self._windows = copy.deepcopy(self._store.windows)
        self._slots = copy.deepcopy(self._store.slots)
        self._appointments = copy.deepcopy(self._store.appointments)
        self._loaded_versions = {i: a.version for i, a in self._store.appointments.items()}
        self.directory = InMemoryDirectory(self._store)
        self.windows = InMemoryScheduleWindowRepository(self._windows)
        self.slots = InMemorySlotRepository(self._slots)
        self.appointments = InMemoryAppointmentRepository(self._appointments)
        self.committed = False
        self.rolled_back = False
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None or not self.committed:
            await self.rollback()

    async def commit(self) -> None:
        for appointment_id in self.appointments.dirty:
            current = self._store.appointments.get(appointment_id)
            loaded = self._loaded_versions.get(appointment_id)
            if current is not None and loaded is not None and current.version != loaded:
                raise ConcurrentModificationException("Appointment", appointment_id)
        # Written appointments are re-checked against what others committed meanwhile
        committed = InMemoryAppointmentRepository(self._store.appointments)
        for appointment_id in self.appointments.dirty:
            committed._check_unique(self._appointments[appointment_id])
        for appointment_id in self.appointments.dirty:
            self._store.appointments[appointment_id] = copy.deepcopy(self._appointments[appointment_id])
        self._store.windows = self._windows
        self._store.slots = self._slots
        self._store.commits += 1
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True


class FixedClock(IClock):
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current


# ============================================================================
# DOMAIN FIXTURES
# ============================================================================


@pytest.fixture
def store() -> SchedulingStore:
    """Store seeded with the reference rows every test needs."""
    return SchedulingStore(
        practitioners={PRACTITIONER_ID, OTHER_PRACTITIONER_ID},
        patients={PATIENT_ID, OTHER_PATIENT_ID},
        branches={BRANCH_ID},
        locations={LOCATION_ID},
    )


@pytest.fixture
def uow(store: SchedulingStore) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(store)


@pytest.fixture
def clock() -> FixedClock:
    """Now is Tuesday 2030-01-01 08:00, before every test date."""
    return FixedClock(datetime(2030, 1, 1, 8, 0))


@pytest.fixture
def morning_window(store: SchedulingStore) -> ScheduleWindow:
    """09:00 - 12:00 with overtime from 11:00."""
    return store.add_window("window-morning", time(9, 0), time(12, 0), time(11, 0))


@pytest.fixture
def afternoon_window(store: SchedulingStore) -> ScheduleWindow:
    """14:00 - 16:00 without overtime."""
    return store.add_window("window-afternoon", time(14, 0), time(16, 0))


@pytest.fixture
def monday_slot(store: SchedulingStore, morning_window: ScheduleWindow) -> RecurringSlot:
    """Monday slot, 30 minutes, attached to the morning window."""
    return store.add_slot(
        RecurringSlot(
            id="slot-monday",
            practitioner_id=PRACTITIONER_ID,
            branch_id=BRANCH_ID,
            day_of_week=DayOfWeek.MONDAY,
            duration_minutes=30,
            schedule_ids=[morning_window.id],
        )
    )


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def db_url() -> str | None:
    """Return test database URL, if one is configured."""
    return os.getenv("TEST_DATABASE_URL")


@pytest_asyncio.fixture
async def async_engine(db_url: str | None):
    """Create async database engine for testing."""
    if not db_url:
        pytest.skip("TEST_DATABASE_URL not configured")
    engine = create_async_engine(db_url, echo=False, pool_pre_ping=True, pool_size=5, max_overflow=10)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def async_session_factory(async_engine) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create async session factory."""
    yield async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
