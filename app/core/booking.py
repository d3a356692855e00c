# app/core/booking.py

import logging
from datetime import date, datetime
from typing import Callable, Literal, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session

from app.core.availability import conflict_scope, is_slot_available
from app.core.overlays import shop_now, slot_instant
from app.core.schedule import get_admin_settings
from app.core.timelabels import parse_label
from app.errors import (
    Conflict,
    DuplicateSlot,
    NoBarberResolved,
    NotFound,
    SlotUnavailable,
    StoreUnavailable,
)
from app.models import AdminSettings, Appointment, Barber, Service, owner_key
from app.notifications import NotificationEvent

logger = logging.getLogger(__name__)

Notify = Callable[[NotificationEvent], None]


def build_event(
    session: Session, appointment: Appointment, kind: Literal["created", "cancelled"]
) -> NotificationEvent:
    service = session.get(Service, appointment.service_id)
    barber = session.get(Barber, appointment.barber_id) if appointment.barber_id is not None else None
    return NotificationEvent(
        kind=kind,
        client_phone=appointment.client_phone,
        client_name=appointment.client_name,
        date=appointment.date.isoformat(),
        time=appointment.time,
        service=service.name if service else str(appointment.service_id),
        barber_name=barber.name if barber else None,
        barber_phone=barber.phone if barber else None,
    )


def _notify(session: Session, appointment: Appointment, kind, notify: Optional[Notify]) -> None:
    if notify is None:
        return
    try:
        notify(build_event(session, appointment, kind))
    except Exception:
        logger.exception("Failed to hand off %s notification for appointment %s", kind, appointment.id)


def resolve_barber(
    session: Session, barber_id: Optional[int], settings: Optional[AdminSettings] = None
) -> Optional[int]:
    """Explicit barber, else the configured default, else none (single-barber shops)."""
    settings = settings or get_admin_settings(session)
    effective = barber_id if barber_id is not None else settings.default_barber_id
    if effective is None and settings.multiple_barbers_enabled:
        raise NoBarberResolved()
    return effective


def create_appointment(
    session: Session,
    *,
    day: date,
    time: str,
    client_name: str,
    client_phone: str,
    service_id: int,
    barber_id: Optional[int] = None,
    now: Optional[datetime] = None,
    notify: Optional[Notify] = None,
) -> Appointment:
    parse_label(time)
    now = now or shop_now()

    try:
        settings = get_admin_settings(session)
        effective_barber = resolve_barber(session, barber_id, settings)

        if session.get(Service, service_id) is None:
            raise NotFound(f"Service {service_id} not found")
        if effective_barber is not None:
            barber = session.get(Barber, effective_barber)
            if barber is None or not barber.is_active:
                raise NotFound(f"Barber {effective_barber} not found")
    except OperationalError:
        logger.exception("Booking lookup failed for %s %s", day, time)
        raise StoreUnavailable("create_appointment")

    if slot_instant(day, time) <= now:
        raise SlotUnavailable(day, time, effective_barber, reason="That time has already passed")

    # Advisory: the unique index on the table is what actually prevents double-booking.
    if not is_slot_available(session, day, time, effective_barber, now=now):
        logger.info("Slot %s %s (barber=%s) unavailable", day, time, effective_barber)
        raise SlotUnavailable(day, time, effective_barber)

    appointment = Appointment(
        date=day,
        time=time,
        client_name=client_name,
        client_phone=client_phone,
        service_id=service_id,
        barber_id=effective_barber,
        slot_owner=owner_key(conflict_scope(settings, effective_barber)),
        confirmed=True,
        cancelled=False,
        created_at=now,
    )

    session.add(appointment)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.warning("Lost booking race for %s %s (barber=%s)", day, time, effective_barber)
        raise DuplicateSlot(day, time, effective_barber)
    except OperationalError:
        session.rollback()
        logger.exception("Insert failed for %s %s (barber=%s)", day, time, effective_barber)
        raise StoreUnavailable("create_appointment")

    session.refresh(appointment)
    logger.info(
        "Booked appointment %s: %s %s (barber=%s)", appointment.id, day, time, effective_barber
    )

    _notify(session, appointment, "created", notify)
    return appointment


def cancel_appointment(
    session: Session,
    appointment_id: int,
    *,
    now: Optional[datetime] = None,
    notify: Optional[Notify] = None,
) -> Appointment:
    try:
        appointment = session.get(Appointment, appointment_id)
    except OperationalError:
        logger.exception("Lookup failed for appointment %s", appointment_id)
        raise StoreUnavailable("cancel_appointment")
    if appointment is None:
        raise NotFound("Appointment not found")
    if appointment.cancelled:
        raise Conflict("Appointment already cancelled")

    appointment.cancelled = True
    appointment.cancelled_at = now or shop_now()
    session.add(appointment)
    try:
        session.commit()
    except OperationalError:
        session.rollback()
        logger.exception("Cancel failed for appointment %s", appointment_id)
        raise StoreUnavailable("cancel_appointment")

    session.refresh(appointment)
    logger.info("Cancelled appointment %s (%s %s)", appointment.id, appointment.date, appointment.time)

    _notify(session, appointment, "cancelled", notify)
    return appointment
