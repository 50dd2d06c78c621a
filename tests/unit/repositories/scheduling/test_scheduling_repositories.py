"""
Unit tests for the scheduling SQLAlchemy repositories and unit of work.

Sessions are mocked; constraint behavior against a real database is covered
by tests/integration/test_concurrent_booking.py.
"""

from datetime import date, time
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from conftest import MONDAY, PATIENT_ID, PRACTITIONER_ID

from agenda.core.domain import ConcurrentModificationException, EntityNotFoundException, SlotAlreadyTakenException
from agenda.domains.scheduling.domain.entities import Appointment, RecurringSlot
from agenda.domains.scheduling.domain.value_objects import AppointmentStatus, DayOfWeek, TypeAvailability
from agenda.domains.scheduling.infrastructure.persistence.sqlalchemy.models import (
    AppointmentModel,
    AppointmentTypeAvailabilityModel,
)
from agenda.domains.scheduling.infrastructure.repositories import (
    SQLAlchemyAppointmentRepository,
    SQLAlchemyDirectory,
    SQLAlchemyScheduleWindowRepository,
    SQLAlchemySlotRepository,
)
from agenda.domains.scheduling.infrastructure.repositories.ids import is_unique_violation, is_valid_uuid
from agenda.domains.scheduling.infrastructure.unit_of_work import SQLAlchemyUnitOfWork

APPOINTMENT_ID = "0f1e2d3c-4b5a-4968-8776-65544332211a"
SLOT_ID = "1a2b3c4d-5e6f-4a7b-8c9d-0e1f2a3b4c5d"
WINDOW_ID = "2b3c4d5e-6f7a-4b8c-9d0e-1f2a3b4c5d6e"
TYPE_ID = "3c4d5e6f-7a8b-4c9d-8e1f-2a3b4c5d6e7f"


def _integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO appointments ...", {}, Exception(message))


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def mock_async_session():
    """Create a mock async database session."""
    session = AsyncMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_appointment() -> Appointment:
    return Appointment(
        id=APPOINTMENT_ID,
        patient_id=PATIENT_ID,
        practitioner_id=PRACTITIONER_ID,
        slot_id=SLOT_ID,
        schedule_id=WINDOW_ID,
        appointment_date=MONDAY,
        hour=time(9, 30),
    )


@pytest.fixture
def sample_window_model():
    """Sample SQLAlchemy schedule window model."""
    model = MagicMock()
    model.id = WINDOW_ID
    model.opening_hour = time(9, 0)
    model.close_hour = time(12, 0)
    model.overtime_start_hour = None
    model.created_at = None
    model.updated_at = None
    return model


# ============================================================================
# Identifier helpers
# ============================================================================


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        (PRACTITIONER_ID, True),
        (PRACTITIONER_ID.upper(), True),
        ("slot-monday", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_uuid(value, expected):
    assert is_valid_uuid(value) is expected


@pytest.mark.unit
def test_is_unique_violation():
    duplicate = _integrity_error('duplicate key value violates unique constraint "uq_appointments_practitioner_date_hour"')
    foreign_key = _integrity_error('insert or update on table "appointments" violates foreign key constraint')

    assert is_unique_violation(duplicate, "uq_appointments_practitioner_date_hour")
    assert not is_unique_violation(foreign_key)


@pytest.mark.unit
def test_is_unique_violation_with_constraint_requires_that_constraint():
    primary_key = _integrity_error('duplicate key value violates unique constraint "appointments_pkey"')

    assert is_unique_violation(primary_key)
    assert not is_unique_violation(primary_key, "uq_appointments_practitioner_date_hour")


# ============================================================================
# Appointment Repository Tests
# ============================================================================


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_add_flushes_and_maps(mock_async_session, sample_appointment):
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    saved = await repository.add(sample_appointment)

    mock_async_session.add.assert_called_once()
    mock_async_session.flush.assert_awaited_once()
    model = mock_async_session.add.call_args.args[0]
    assert model.status == "pending"
    assert model.hour == time(9, 30)
    assert saved.id == APPOINTMENT_ID
    assert saved.status is AppointmentStatus.PENDING


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_add_duplicate_tuple_is_slot_taken(mock_async_session, sample_appointment):
    mock_async_session.flush.side_effect = _integrity_error(
        'duplicate key value violates unique constraint "uq_appointments_practitioner_date_hour"'
    )
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    with pytest.raises(SlotAlreadyTakenException) as exc_info:
        await repository.add(sample_appointment)

    assert exc_info.value.details == {
        "practitioner_id": PRACTITIONER_ID,
        "date": "2030-01-07",
        "hour": "09:30",
    }


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_add_other_integrity_error_propagates(mock_async_session, sample_appointment):
    mock_async_session.flush.side_effect = _integrity_error(
        'insert or update on table "appointments" violates foreign key constraint "appointments_slot_id_fkey"'
    )
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    with pytest.raises(IntegrityError):
        await repository.add(sample_appointment)


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_find_by_invalid_id(mock_async_session):
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    assert await repository.find_by_id("not-a-uuid") is None
    mock_async_session.get.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_update_missing(mock_async_session, sample_appointment):
    mock_async_session.get.return_value = None
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    with pytest.raises(EntityNotFoundException):
        await repository.update(sample_appointment)

    mock_async_session.flush.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_find_for_update_locks_the_row(mock_async_session, sample_appointment):
    repository = SQLAlchemyAppointmentRepository(mock_async_session)
    model = repository._to_model(sample_appointment)
    model.version = 3
    mock_async_session.get.return_value = model

    found = await repository.find_by_id_for_update(APPOINTMENT_ID)

    mock_async_session.get.assert_awaited_once_with(
        AppointmentModel, APPOINTMENT_ID, with_for_update=True, populate_existing=True
    )
    assert found.id == APPOINTMENT_ID
    assert found.version == 3


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_update_of_stale_row_is_a_conflict(mock_async_session, sample_appointment):
    repository = SQLAlchemyAppointmentRepository(mock_async_session)
    mock_async_session.get.return_value = repository._to_model(sample_appointment)
    mock_async_session.flush.side_effect = StaleDataError(
        "UPDATE statement on table 'appointments' expected to update 1 row(s); 0 were matched."
    )
    sample_appointment.cancel("duplicate")

    with pytest.raises(ConcurrentModificationException) as exc_info:
        await repository.update(sample_appointment)

    assert exc_info.value.details == {"entity_type": "Appointment", "entity_id": APPOINTMENT_ID}


@pytest.mark.unit
def test_appointment_version_is_left_to_the_mapper(sample_appointment):
    repository = SQLAlchemyAppointmentRepository(MagicMock())
    model = repository._to_model(sample_appointment)
    model.version = 4
    sample_appointment.approve()

    repository._update_model(model, sample_appointment)

    assert model.status == "approved"
    assert model.version == 4
    assert AppointmentModel.__mapper__.version_id_col is AppointmentModel.__table__.c.version


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_exists_active_at(mock_async_session):
    mock_result = MagicMock()
    mock_result.scalar.return_value = True
    mock_async_session.execute.return_value = mock_result
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    assert await repository.exists_active_at(PRACTITIONER_ID, MONDAY, time(9, 30), exclude_appointment_id=APPOINTMENT_ID)
    assert not await repository.exists_active_at("not-a-uuid", MONDAY, time(9, 30))
    mock_async_session.execute.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_appointment_find_booked_hours(mock_async_session):
    mock_result = MagicMock()
    mock_result.scalars.return_value.all.return_value = [time(9, 0), time(10, 30)]
    mock_async_session.execute.return_value = mock_result
    repository = SQLAlchemyAppointmentRepository(mock_async_session)

    hours = await repository.find_booked_hours(PRACTITIONER_ID, date(2030, 1, 7))

    assert hours == [time(9, 0), time(10, 30)]


# ============================================================================
# Schedule Window Repository Tests
# ============================================================================


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_window_find_or_create_returns_existing(mock_async_session, sample_window_model):
    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = sample_window_model
    mock_async_session.execute.return_value = mock_result
    repository = SQLAlchemyScheduleWindowRepository(mock_async_session)

    window = await repository.find_or_create(time(9, 0), time(12, 0))

    assert window.id == WINDOW_ID
    assert window.bounds == (time(9, 0), time(12, 0), None)
    mock_async_session.add.assert_not_called()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_window_find_or_create_creates(mock_async_session):
    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = None
    mock_async_session.execute.return_value = mock_result
    savepoint = MagicMock()
    savepoint.__aenter__ = AsyncMock()
    savepoint.__aexit__ = AsyncMock(return_value=False)
    mock_async_session.begin_nested = MagicMock(return_value=savepoint)
    repository = SQLAlchemyScheduleWindowRepository(mock_async_session)

    window = await repository.find_or_create(time(14, 0), time(16, 0), time(15, 30))

    mock_async_session.add.assert_called_once()
    assert is_valid_uuid(window.id)
    assert window.overtime_start_hour == time(15, 30)


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_window_find_or_create_race_returns_winner(mock_async_session, sample_window_model):
    missing = MagicMock()
    missing.scalar_one_or_none.return_value = None
    found = MagicMock()
    found.scalar_one_or_none.return_value = sample_window_model
    mock_async_session.execute.side_effect = [missing, found]
    savepoint = MagicMock()
    savepoint.__aenter__ = AsyncMock()
    savepoint.__aexit__ = AsyncMock(
        side_effect=_integrity_error('duplicate key value violates unique constraint "uq_schedule_windows_bounds"')
    )
    mock_async_session.begin_nested = MagicMock(return_value=savepoint)
    repository = SQLAlchemyScheduleWindowRepository(mock_async_session)

    window = await repository.find_or_create(time(9, 0), time(12, 0))

    assert window.id == WINDOW_ID
    assert mock_async_session.execute.await_count == 2


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_window_find_by_ids_skips_invalid(mock_async_session):
    repository = SQLAlchemyScheduleWindowRepository(mock_async_session)

    assert await repository.find_by_ids(["window-morning"]) == {}
    mock_async_session.execute.assert_not_awaited()


# ============================================================================
# Slot Repository / Directory Tests
# ============================================================================


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_slot_add_writes_attachments(mock_async_session):
    repository = SQLAlchemySlotRepository(mock_async_session)
    slot = RecurringSlot(
        id=SLOT_ID,
        practitioner_id=PRACTITIONER_ID,
        branch_id=PRACTITIONER_ID,
        day_of_week=DayOfWeek.MONDAY,
        schedule_ids=[WINDOW_ID],
    )

    saved = await repository.add(slot)

    mock_async_session.flush.assert_awaited_once()
    mock_async_session.execute.assert_awaited_once()
    assert mock_async_session.execute.call_args.args[1] == [{"slot_id": SLOT_ID, "schedule_id": WINDOW_ID}]
    assert saved.schedule_ids == [WINDOW_ID]
    assert saved.day_of_week is DayOfWeek.MONDAY


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_slot_update_missing(mock_async_session):
    mock_async_session.get.return_value = None
    repository = SQLAlchemySlotRepository(mock_async_session)

    with pytest.raises(EntityNotFoundException):
        await repository.update(RecurringSlot(id=SLOT_ID, practitioner_id=PRACTITIONER_ID))


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_directory_rejects_invalid_ids_without_query(mock_async_session):
    directory = SQLAlchemyDirectory(mock_async_session)

    assert not await directory.practitioner_exists("dr-house")
    assert not await directory.location_exists("")
    mock_async_session.execute.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_directory_exists(mock_async_session):
    mock_result = MagicMock()
    mock_result.scalar.return_value = True
    mock_async_session.execute.return_value = mock_result
    directory = SQLAlchemyDirectory(mock_async_session)

    assert await directory.patient_exists(PATIENT_ID)


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_directory_lock_practitioner_selects_for_update(mock_async_session):
    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = PRACTITIONER_ID
    mock_async_session.execute.return_value = mock_result
    directory = SQLAlchemyDirectory(mock_async_session)

    assert await directory.lock_practitioner(PRACTITIONER_ID)

    statement = mock_async_session.execute.await_args.args[0]
    assert "FOR UPDATE" in str(statement.compile(dialect=postgresql.dialect()))


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_directory_lock_missing_practitioner(mock_async_session):
    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = None
    mock_async_session.execute.return_value = mock_result
    directory = SQLAlchemyDirectory(mock_async_session)

    assert not await directory.lock_practitioner(PRACTITIONER_ID)
    assert not await directory.lock_practitioner("dr-house")
    mock_async_session.execute.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_directory_unknown_appointment_type(mock_async_session):
    mock_result = MagicMock()
    mock_result.scalar.return_value = False
    mock_async_session.execute.return_value = mock_result
    directory = SQLAlchemyDirectory(mock_async_session)

    assert await directory.find_type_availabilities(TYPE_ID) is None
    mock_async_session.execute.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_directory_type_availabilities(mock_async_session):
    type_exists = MagicMock()
    type_exists.scalar.return_value = True
    rows = MagicMock()
    rows.scalars.return_value.all.return_value = [
        AppointmentTypeAvailabilityModel(
            id="a", appointment_type_id=TYPE_ID, day_of_week="MONDAY", start_time=time(10, 0), end_time=time(12, 0)
        ),
        AppointmentTypeAvailabilityModel(
            id="b", appointment_type_id=TYPE_ID, day_of_week="LUNES", start_time=time(10, 0), end_time=time(12, 0)
        ),
    ]
    mock_async_session.execute.side_effect = [type_exists, rows]
    directory = SQLAlchemyDirectory(mock_async_session)

    availabilities = await directory.find_type_availabilities(TYPE_ID)

    assert availabilities == [TypeAvailability(DayOfWeek.MONDAY, time(10, 0), time(12, 0))]


# ============================================================================
# Unit of Work Tests
# ============================================================================


@pytest.fixture
def session_factory(mock_async_session):
    return MagicMock(return_value=mock_async_session)


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_uow_commit(session_factory, mock_async_session):
    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        assert isinstance(uow.appointments, SQLAlchemyAppointmentRepository)
        await uow.commit()

    mock_async_session.commit.assert_awaited_once()
    mock_async_session.rollback.assert_not_awaited()
    mock_async_session.close.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_uow_rolls_back_without_commit(session_factory, mock_async_session):
    async with SQLAlchemyUnitOfWork(session_factory):
        pass

    mock_async_session.rollback.assert_awaited_once()
    mock_async_session.close.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.repository
@pytest.mark.asyncio
async def test_uow_rolls_back_on_error(session_factory, mock_async_session):
    with pytest.raises(SlotAlreadyTakenException):
        async with SQLAlchemyUnitOfWork(session_factory):
            raise SlotAlreadyTakenException(PRACTITIONER_ID, "2030-01-07", "09:30")

    mock_async_session.rollback.assert_awaited_once()
    mock_async_session.commit.assert_not_awaited()


@pytest.mark.unit
def test_uow_session_outside_context(session_factory):
    uow = SQLAlchemyUnitOfWork(session_factory)

    with pytest.raises(RuntimeError):
        _ = uow.session
