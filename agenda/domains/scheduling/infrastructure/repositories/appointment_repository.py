"""
Appointment Repository Implementation

SQLAlchemy implementation of IAppointmentRepository.
"""

import logging
from datetime import date, time

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.domain import (
    ConcurrentModificationException,
    EntityNotFoundException,
    SlotAlreadyTakenException,
)
from agenda.domains.scheduling.application.ports.appointment_repository import IAppointmentRepository
from agenda.domains.scheduling.domain.entities.appointment import Appointment
from agenda.domains.scheduling.domain.value_objects.appointment_status import AppointmentStatus
from agenda.domains.scheduling.domain.value_objects.hours import format_hour
from agenda.domains.scheduling.infrastructure.persistence.sqlalchemy.models import AppointmentModel

from .ids import is_unique_violation, is_valid_uuid

logger = logging.getLogger(__name__)

UNIQUE_TUPLE_INDEX = "uq_appointments_practitioner_date_hour"


class SQLAlchemyAppointmentRepository(IAppointmentRepository):
    """
    SQLAlchemy implementation of appointment repository.

    Writes are flushed immediately so that the partial unique index on
    (practitioner, date, hour) is checked inside the caller's transaction.
    Updates are guarded by the mapper's version counter
    (``UPDATE ... WHERE version = :loaded``).
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, appointment_id: str) -> Appointment | None:
        """Find appointment by ID."""
        if not is_valid_uuid(appointment_id):
            return None
        model = await self.session.get(AppointmentModel, appointment_id)
        return self._to_entity(model) if model else None

    async def find_by_id_for_update(self, appointment_id: str) -> Appointment | None:
        """Find appointment by ID with a row lock (SELECT ... FOR UPDATE)."""
        if not is_valid_uuid(appointment_id):
            return None
        model = await self.session.get(
            AppointmentModel,
            appointment_id,
            with_for_update=True,
            populate_existing=True,
        )
        return self._to_entity(model) if model else None

    async def find_booked_hours(self, practitioner_id: str, appointment_date: date) -> list[time]:
        """Hours of the non-cancelled appointments of a practitioner on a date."""
        if not is_valid_uuid(practitioner_id):
            return []

        result = await self.session.execute(
            select(AppointmentModel.hour)
            .where(
                AppointmentModel.practitioner_id == practitioner_id,
                AppointmentModel.appointment_date == appointment_date,
                AppointmentModel.status != AppointmentStatus.CANCELLED.value,
            )
            .order_by(AppointmentModel.hour)
        )
        return list(result.scalars().all())

    async def exists_active_at(
        self,
        practitioner_id: str,
        appointment_date: date,
        hour: time,
        exclude_appointment_id: str | None = None,
    ) -> bool:
        """Check whether a non-cancelled appointment holds the tuple."""
        if not is_valid_uuid(practitioner_id):
            return False

        condition = exists().where(
            AppointmentModel.practitioner_id == practitioner_id,
            AppointmentModel.appointment_date == appointment_date,
            AppointmentModel.hour == hour,
            AppointmentModel.status != AppointmentStatus.CANCELLED.value,
        )
        if exclude_appointment_id:
            condition = condition.where(AppointmentModel.id != exclude_appointment_id)

        result = await self.session.execute(select(condition))
        return bool(result.scalar())

    async def add(self, appointment: Appointment) -> Appointment:
        """Persist a new appointment."""
        model = self._to_model(appointment)
        self.session.add(model)
        await self._flush(appointment)
        return self._to_entity(model)

    async def update(self, appointment: Appointment) -> Appointment:
        """Persist changes to an existing appointment."""
        model = await self.session.get(AppointmentModel, appointment.id) if is_valid_uuid(appointment.id) else None
        if model is None:
            raise EntityNotFoundException("Appointment", appointment.id)

        self._update_model(model, appointment)
        await self._flush(appointment)
        return self._to_entity(model)

    async def _flush(self, appointment: Appointment) -> None:
        try:
            await self.session.flush()
        except StaleDataError as e:
            logger.warning(f"Appointment {appointment.id} changed since it was read; update rejected")
            raise ConcurrentModificationException("Appointment", appointment.id) from e
        except IntegrityError as e:
            if not is_unique_violation(e, UNIQUE_TUPLE_INDEX):
                logger.error(f"Failed to persist appointment {appointment.id}: {e}")
                raise
            logger.warning(
                f"Concurrent booking rejected for practitioner {appointment.practitioner_id} "
                f"on {appointment.appointment_date} at {appointment.hour}"
            )
            raise SlotAlreadyTakenException(
                appointment.practitioner_id,
                appointment.appointment_date.isoformat() if appointment.appointment_date else "",
                format_hour(appointment.hour) if appointment.hour else "",
            ) from e

    # Mapping methods

    def _to_entity(self, model: AppointmentModel) -> Appointment:
        """Convert model to entity."""
        appointment = Appointment(
            id=model.id,
            patient_id=model.patient_id,
            practitioner_id=model.practitioner_id,
            slot_id=model.slot_id,
            schedule_id=model.schedule_id,
            appointment_date=model.appointment_date,
            hour=model.hour,
            duration_minutes=model.duration_minutes,
            status=AppointmentStatus(model.status),
            observation=model.observation,
            reprogrammed=model.reprogrammed,
            cancelled_at=model.cancelled_at,
            cancellation_reason=model.cancellation_reason,
            version=model.version or 0,
        )
        if model.created_at:
            appointment.created_at = model.created_at  # type: ignore[assignment]
        if model.updated_at:
            appointment.updated_at = model.updated_at  # type: ignore[assignment]
        return appointment

    def _to_model(self, appointment: Appointment) -> AppointmentModel:
        """Convert entity to model."""
        return AppointmentModel(
            id=appointment.id,
            patient_id=appointment.patient_id,
            practitioner_id=appointment.practitioner_id,
            slot_id=appointment.slot_id,
            schedule_id=appointment.schedule_id,
            appointment_date=appointment.appointment_date,
            hour=appointment.hour,
            duration_minutes=appointment.duration_minutes,
            status=appointment.status.value,
            observation=appointment.observation,
            reprogrammed=appointment.reprogrammed,
            cancelled_at=appointment.cancelled_at,
            cancellation_reason=appointment.cancellation_reason,
        )

    def _update_model(self, model: AppointmentModel, appointment: Appointment) -> None:
        """Update model from entity."""
        model.slot_id = appointment.slot_id
        model.schedule_id = appointment.schedule_id
        model.appointment_date = appointment.appointment_date
        model.hour = appointment.hour
        model.duration_minutes = appointment.duration_minutes
        model.status = appointment.status.value
        model.observation = appointment.observation
        model.reprogrammed = appointment.reprogrammed
        model.cancelled_at = appointment.cancelled_at
        model.cancellation_reason = appointment.cancellation_reason
