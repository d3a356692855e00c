# app/statistics.py

import calendar
import logging
from collections import Counter
from datetime import date
from typing import List, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.models import Appointment, Service
from app.schemas import StatisticsResponse

logger = logging.getLogger(__name__)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def previous_month(year: int, month: int) -> Tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def _active_in(session: Session, start: date, end: date) -> List[Appointment]:
    return list(
        session.exec(
            select(Appointment)
            .where(Appointment.date >= start)
            .where(Appointment.date <= end)
            .where(Appointment.cancelled == False)  # noqa: E712
        ).all()
    )


def _pct(part: int, whole: int) -> float:
    return round(part * 100.0 / whole, 1) if whole else 0.0


def monthly_statistics(session: Session, year: int, month: int) -> StatisticsResponse:
    """Booking figures for one month; cancelled appointments are not counted.

    Store errors are logged and produce an empty report instead of failing.
    """
    label = f"{year:04d}-{month:02d}"
    try:
        start, end = month_bounds(year, month)
        current = _active_in(session, start, end)
        prev_start, prev_end = month_bounds(*previous_month(year, month))
        previous_count = len(_active_in(session, prev_start, prev_end))
        services = {s.id: s for s in session.exec(select(Service)).all()}
    except SQLAlchemyError:
        logger.exception("Could not compute statistics for %s", label)
        return StatisticsResponse(month=label)

    total = len(current)
    service_counts: Counter = Counter()
    service_revenue: Counter = Counter()
    hour_counts: Counter = Counter()
    for appt in current:
        service = services.get(appt.service_id)
        name = service.name if service else f"#{appt.service_id}"
        service_counts[name] += 1
        service_revenue[name] += service.price if service else 0
        hour_counts[appt.time] += 1

    if previous_count:
        growth = round((total - previous_count) * 100.0 / previous_count, 1)
    else:
        growth = 100.0 if total else 0.0

    service_stats = [
        {"service": name, "count": count, "percentage": _pct(count, total), "revenue": service_revenue[name]}
        for name, count in service_counts.most_common()
    ]
    hour_stats = [
        {"hour": hour, "count": count, "percentage": _pct(count, total)}
        for hour, count in hour_counts.most_common()
    ]

    return StatisticsResponse(
        month=label,
        total_appointments=total,
        total_revenue=sum(service_revenue.values()),
        average_daily=round(total / end.day, 2),
        growth_rate=growth,
        most_popular_service=service_stats[0]["service"] if service_stats else None,
        most_popular_hour=hour_stats[0]["hour"] if hour_stats else None,
        services=service_stats,
        hours=hour_stats,
    )
