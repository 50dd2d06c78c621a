"""
Tests for the scheduling container wiring.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from agenda.config.settings import Settings
from agenda.core import container as container_module
from agenda.core.container import SchedulingContainer, get_container, reset_container
from agenda.domains.scheduling.application.use_cases import (
    BookAppointmentUseCase,
    RegisterSlotUseCase,
    ReprogramAppointmentUseCase,
)
from agenda.domains.scheduling.infrastructure.unit_of_work import SQLAlchemyUnitOfWork


@pytest.fixture
def container() -> SchedulingContainer:
    settings = Settings(_env_file=None, APP_TIMEZONE="UTC", ALIGNMENT_SUGGESTIONS=5, DEFAULT_SLOT_DURATION_MINUTES=15)
    return SchedulingContainer(session_factory=MagicMock(), settings=settings)


@pytest.mark.unit
def test_each_use_case_gets_its_own_unit_of_work(container):
    first = container.create_book_appointment_use_case()
    second = container.create_book_appointment_use_case()

    assert isinstance(first, BookAppointmentUseCase)
    assert isinstance(first._uow, SQLAlchemyUnitOfWork)
    assert first._uow is not second._uow
    assert first._service is second._service


@pytest.mark.unit
def test_settings_reach_use_cases(container):
    reprogram = container.create_reprogram_appointment_use_case()
    register = container.create_register_slot_use_case()

    assert isinstance(reprogram, ReprogramAppointmentUseCase)
    assert reprogram._suggestions == 5
    assert isinstance(register, RegisterSlotUseCase)
    assert register._default_duration == 15


@pytest.mark.unit
def test_clock_uses_configured_timezone(container):
    now = container.create_clock().now()

    assert isinstance(now, datetime)
    assert now.tzinfo is None


@pytest.mark.unit
def test_global_container_is_singleton(monkeypatch, container):
    monkeypatch.setattr(container_module, "_container", container)

    assert get_container() is container

    reset_container()
    assert container_module._container is None
