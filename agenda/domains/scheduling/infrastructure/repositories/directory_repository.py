"""
Directory Repository Implementation

SQLAlchemy implementation of IDirectory over the reference tables.
"""

import logging

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.domains.scheduling.application.ports.directory_port import IDirectory
from agenda.domains.scheduling.domain.value_objects.day_of_week import DayOfWeek
from agenda.domains.scheduling.domain.value_objects.type_availability import TypeAvailability
from agenda.domains.scheduling.infrastructure.persistence.sqlalchemy.models import (
    AppointmentTypeAvailabilityModel,
    AppointmentTypeModel,
    BranchModel,
    LocationModel,
    PatientModel,
    PractitionerModel,
)

from .ids import is_valid_uuid

logger = logging.getLogger(__name__)


class SQLAlchemyDirectory(IDirectory):
    """Existence checks by primary key, plus the practitioner row lock."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _exists(self, model, entity_id: str) -> bool:
        if not is_valid_uuid(entity_id):
            return False
        result = await self.session.execute(select(exists().where(model.id == entity_id)))
        return bool(result.scalar())

    async def practitioner_exists(self, practitioner_id: str) -> bool:
        return await self._exists(PractitionerModel, practitioner_id)

    async def patient_exists(self, patient_id: str) -> bool:
        return await self._exists(PatientModel, patient_id)

    async def branch_exists(self, branch_id: str) -> bool:
        return await self._exists(BranchModel, branch_id)

    async def location_exists(self, location_id: str) -> bool:
        return await self._exists(LocationModel, location_id)

    async def lock_practitioner(self, practitioner_id: str) -> bool:
        """SELECT ... FOR UPDATE on the practitioner row; released on commit or rollback."""
        if not is_valid_uuid(practitioner_id):
            return False
        result = await self.session.execute(
            select(PractitionerModel.id).where(PractitionerModel.id == practitioner_id).with_for_update()
        )
        return result.scalar_one_or_none() is not None

    async def find_type_availabilities(self, appointment_type_id: str) -> list[TypeAvailability] | None:
        if not await self._exists(AppointmentTypeModel, appointment_type_id):
            return None

        result = await self.session.execute(
            select(AppointmentTypeAvailabilityModel)
            .where(AppointmentTypeAvailabilityModel.appointment_type_id == appointment_type_id)
            .order_by(AppointmentTypeAvailabilityModel.start_time)
        )
        availabilities = []
        for model in result.scalars().all():
            try:
                day = DayOfWeek(model.day_of_week)
            except ValueError:
                logger.warning(f"Appointment type availability {model.id} has unknown day {model.day_of_week!r}")
                continue
            availabilities.append(
                TypeAvailability(day_of_week=day, start_time=model.start_time, end_time=model.end_time)
            )
        return availabilities
