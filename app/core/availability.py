# app/core/availability.py

import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from app.core.overlays import excluded_labels
from app.core.schedule import get_admin_settings, hours_for_date
from app.core.timelabels import parse_label
from app.errors import StoreUnavailable
from app.models import AdminSettings, Appointment

logger = logging.getLogger(__name__)


def booked_labels(session: Session, day: date, barber_id: Optional[int] = None) -> List[str]:
    """Times of live appointments on ``day``; every barber's when ``barber_id`` is None."""
    stmt = (
        select(Appointment.time)
        .where(Appointment.date == day)
        .where(Appointment.cancelled == False)  # noqa: E712
    )
    if barber_id is not None:
        stmt = stmt.where(Appointment.barber_id == barber_id)
    return list(session.exec(stmt).all())


def conflict_scope(settings: AdminSettings, barber_id: Optional[int]) -> Optional[int]:
    """Barber whose bookings compete for a slot; None means every booking on the date.

    With multiple barbers off there is one chair, so the recorded barber does
    not matter.
    """
    return barber_id if settings.multiple_barbers_enabled else None


def day_availability(
    session: Session,
    day: date,
    barber_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Dict[str, bool]:
    """Map every scheduled label of ``day`` to whether it can be booked.

    Blocked and booked labels stay in the mapping as ``False`` so callers can
    render them distinctly; an empty mapping means the shop (or barber) has no
    hours that day.
    """
    try:
        settings = get_admin_settings(session)
        candidates = hours_for_date(session, day, barber_id, settings=settings)
        if not candidates:
            return {}

        excluded = excluded_labels(session, day, candidates, barber_id, settings=settings, now=now)
        taken = set(booked_labels(session, day, conflict_scope(settings, barber_id)))
    except OperationalError:
        logger.exception("Availability lookup failed for %s (barber=%s)", day, barber_id)
        raise StoreUnavailable("day_availability")

    return {label: label not in excluded and label not in taken for label in candidates}


def is_slot_available(
    session: Session,
    day: date,
    time: str,
    barber_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> bool:
    parse_label(time)

    try:
        settings = get_admin_settings(session)
        if time not in hours_for_date(session, day, barber_id, settings=settings):
            return False
        if excluded_labels(session, day, [time], barber_id, settings=settings, now=now):
            return False
        return time not in booked_labels(session, day, conflict_scope(settings, barber_id))
    except OperationalError:
        logger.exception("Slot check failed for %s %s (barber=%s)", day, time, barber_id)
        raise StoreUnavailable("is_slot_available")
