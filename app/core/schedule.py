# app/core/schedule.py

from datetime import date
from typing import List, Optional, Union

from sqlmodel import Session

from app.core.timelabels import clock_hour, day_of_week, range_labels, sort_labels
from app.models import AdminSettings, BarberSchedule, BusinessHours


def get_admin_settings(session: Session) -> AdminSettings:
    """The settings singleton, or an unsaved default when none was stored."""
    settings = session.get(AdminSettings, 1)
    if settings is None:
        return AdminSettings(id=1)
    return settings


def _window(start: Optional[str], end: Optional[str]) -> List[str]:
    if not start or not end:
        return []
    return range_labels(clock_hour(start), clock_hour(end))


def labels_for(source: Union[BusinessHours, BarberSchedule]) -> List[str]:
    morning = _window(source.morning_start, source.morning_end)
    afternoon = _window(source.afternoon_start, source.afternoon_end)
    return sort_labels(morning + afternoon)


def hours_for_date(
    session: Session,
    day: date,
    barber_id: Optional[int] = None,
    settings: Optional[AdminSettings] = None,
) -> List[str]:
    """Ordered bookable labels for ``day``, before holidays, blocks and bookings."""
    settings = settings or get_admin_settings(session)
    dow = day_of_week(day)

    if barber_id is not None and settings.multiple_barbers_enabled:
        override = session.get(BarberSchedule, (barber_id, dow))
        if override is not None:
            if not override.is_available:
                return []
            return labels_for(override)

    hours = session.get(BusinessHours, dow)
    if hours is None or not hours.is_open:
        return []
    return labels_for(hours)
