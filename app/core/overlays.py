# app/core/overlays.py

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Set
from zoneinfo import ZoneInfo

from sqlmodel import Session, select

from app.config import SHOP_TIMEZONE
from app.core.schedule import get_admin_settings
from app.core.timelabels import parse_label
from app.models import AdminSettings, BlockedTime, Holiday

logger = logging.getLogger(__name__)


def shop_now() -> datetime:
    """Current wall-clock time at the shop, as a naive datetime."""
    return datetime.now(ZoneInfo(SHOP_TIMEZONE)).replace(tzinfo=None)


def slot_instant(day: date, label: str) -> datetime:
    return datetime.combine(day, datetime.min.time()) + timedelta(minutes=parse_label(label))


def excluded_labels(
    session: Session,
    day: date,
    candidates: Iterable[str],
    barber_id: Optional[int] = None,
    settings: Optional[AdminSettings] = None,
    now: Optional[datetime] = None,
) -> Set[str]:
    """Return the subset of ``candidates`` that cannot be booked on ``day``.

    Rules, first match wins:
      1. a shop-wide holiday excludes every label;
      2. a holiday for ``barber_id`` excludes every label;
      3. a shop-wide blocked time excludes its labels;
      4. a blocked time for ``barber_id`` excludes its labels;
      5. with the early-booking restriction on, a restricted label closer
         than ``early_booking_hours`` to ``now`` is excluded.

    Nothing is cached; holiday, block and settings state is read on every call.
    """
    candidates = list(candidates)
    if not candidates:
        return set()

    settings = settings or get_admin_settings(session)

    holidays = session.exec(select(Holiday).where(Holiday.date == day)).all()
    for holiday in holidays:
        if holiday.barber_id is None:
            logger.debug("%s is a shop holiday (%s)", day, holiday.description)
            return set(candidates)
    if barber_id is not None and any(h.barber_id == barber_id for h in holidays):
        logger.debug("%s is a holiday for barber %s", day, barber_id)
        return set(candidates)

    blocked: Set[str] = set()
    blocks = session.exec(select(BlockedTime).where(BlockedTime.date == day)).all()
    for block in blocks:
        if block.barber_id is None or (barber_id is not None and block.barber_id == barber_id):
            blocked.update(block.time_slots or [])

    excluded = {label for label in candidates if label in blocked}

    if settings.early_booking_restriction_enabled:
        now = now or shop_now()
        notice = timedelta(hours=settings.early_booking_hours)
        restricted = set(settings.restricted_hours or [])
        for label in candidates:
            if label in excluded or label not in restricted:
                continue
            if slot_instant(day, label) - now < notice:
                excluded.add(label)

    return excluded
