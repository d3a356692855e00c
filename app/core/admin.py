# app/core/admin.py
"""Writes to the tables the availability engine reads."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.overlays import shop_now
from app.core.timelabels import sort_labels
from app.errors import Conflict, NotFound
from app.models import (
    AdminSettings,
    Barber,
    BarberSchedule,
    BlockedTime,
    BusinessHours,
    Holiday,
    owner_key,
)
from app.schemas import (
    AdminSettingsIn,
    BarberScheduleIn,
    BlockedTimeCreate,
    BusinessHoursIn,
    HolidayCreate,
)

logger = logging.getLogger(__name__)


def _check_barber(session: Session, barber_id: Optional[int]) -> None:
    if barber_id is not None and session.get(Barber, barber_id) is None:
        raise NotFound(f"Barber {barber_id} not found")


def add_holiday(session: Session, payload: HolidayCreate) -> Holiday:
    """One shop-wide holiday per date, and one per (date, barber)."""
    _check_barber(session, payload.barber_id)

    owner = owner_key(payload.barber_id)
    existing = session.exec(
        select(Holiday).where(Holiday.date == payload.date).where(Holiday.barber_owner == owner)
    ).first()
    if existing is not None:
        raise Conflict(f"A holiday already exists for {payload.date}")

    holiday = Holiday(
        date=payload.date,
        description=payload.description.strip(),
        barber_id=payload.barber_id,
        barber_owner=owner,
    )
    session.add(holiday)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise Conflict(f"A holiday already exists for {payload.date}")
    session.refresh(holiday)
    logger.info("Added holiday %s on %s (barber=%s)", holiday.id, holiday.date, holiday.barber_id)
    return holiday


def add_blocked_time(session: Session, payload: BlockedTimeCreate) -> BlockedTime:
    _check_barber(session, payload.barber_id)

    block = BlockedTime(
        date=payload.date,
        time_slots=sort_labels(payload.time_slots),
        reason=payload.reason.strip(),
        barber_id=payload.barber_id,
    )
    session.add(block)
    session.commit()
    session.refresh(block)
    logger.info("Blocked %s on %s (barber=%s)", ", ".join(block.time_slots), block.date, block.barber_id)
    return block


def delete_row(session: Session, model, row_id: int) -> None:
    row = session.get(model, row_id)
    if row is None:
        raise NotFound(f"{model.__name__} {row_id} not found")
    session.delete(row)
    session.commit()


def put_business_hours(session: Session, day_of_week: int, payload: BusinessHoursIn) -> BusinessHours:
    hours = session.get(BusinessHours, day_of_week) or BusinessHours(day_of_week=day_of_week)
    for field, value in payload.model_dump().items():
        setattr(hours, field, value)
    session.add(hours)
    session.commit()
    session.refresh(hours)
    return hours


def put_barber_schedule(
    session: Session, barber_id: int, day_of_week: int, payload: BarberScheduleIn
) -> BarberSchedule:
    _check_barber(session, barber_id)
    schedule = session.get(BarberSchedule, (barber_id, day_of_week)) or BarberSchedule(
        barber_id=barber_id, day_of_week=day_of_week
    )
    for field, value in payload.model_dump().items():
        setattr(schedule, field, value)
    session.add(schedule)
    session.commit()
    session.refresh(schedule)
    return schedule


def put_settings(session: Session, payload: AdminSettingsIn) -> AdminSettings:
    _check_barber(session, payload.default_barber_id)
    settings = session.get(AdminSettings, 1) or AdminSettings(id=1)
    for field, value in payload.model_dump().items():
        setattr(settings, field, value)
    settings.updated_at = shop_now()
    session.add(settings)
    session.commit()
    session.refresh(settings)
    logger.info("Admin settings updated")
    return settings
