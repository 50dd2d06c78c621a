"""
Unit of Work Port

Groups the repositories of one atomic scheduling operation.
"""

from types import TracebackType
from typing import Protocol, Self, runtime_checkable

from agenda.domains.scheduling.application.ports.appointment_repository import IAppointmentRepository
from agenda.domains.scheduling.application.ports.directory_port import IDirectory
from agenda.domains.scheduling.application.ports.schedule_window_repository import IScheduleWindowRepository
from agenda.domains.scheduling.application.ports.slot_repository import ISlotRepository


@runtime_checkable
class IUnitOfWork(Protocol):
    """
    Async context manager over one transaction.

    Leaving the block without ``commit()``, or with an exception
    (cancellation included), rolls the transaction back.

    Example:
        ```python
        async with uow:
            await uow.appointments.add(appointment)
            await uow.commit()
        ```
    """

    directory: IDirectory
    slots: ISlotRepository
    windows: IScheduleWindowRepository
    appointments: IAppointmentRepository

    async def __aenter__(self) -> Self:
        ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...
