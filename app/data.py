# app/data.py

import logging

from sqlmodel import Session, select

from app.auth import hash_password
from app.config import ADMIN_EMAIL, ADMIN_PASSWORD
from app.models import AdminSettings, BusinessHours, Service, User

logger = logging.getLogger(__name__)

# day_of_week: (morning_start, morning_end, afternoon_start, afternoon_end); 0=Sunday
DEFAULT_BUSINESS_HOURS = {
    0: ("10:00", "15:00", None, None),
    1: ("07:00", "12:00", "15:00", "20:00"),
    2: ("07:00", "12:00", "15:00", "20:00"),
    3: ("07:00", "12:00", "15:00", "19:00"),
    4: ("07:00", "12:00", "15:00", "20:00"),
    5: ("07:00", "12:00", "15:00", "20:00"),
    6: ("07:00", "12:00", "15:00", "20:00"),
}

# name: (price, duration_minutes)
DEFAULT_SERVICES = {
    "Haircut": (500, 45),
    "Haircut + Beard": (700, 45),
    "Haircut + Eyebrows": (600, 45),
    "Haircut + Beard + Eyebrows": (800, 45),
}


def seed_defaults(session: Session) -> None:
    """Insert default hours, services, settings and the bootstrap admin when missing."""
    if session.exec(select(BusinessHours)).first() is None:
        for day, (ms, me, as_, ae) in DEFAULT_BUSINESS_HOURS.items():
            session.add(
                BusinessHours(
                    day_of_week=day,
                    is_open=True,
                    morning_start=ms,
                    morning_end=me,
                    afternoon_start=as_,
                    afternoon_end=ae,
                )
            )
        logger.info("Seeded default business hours")

    if session.exec(select(Service)).first() is None:
        for name, (price, duration) in DEFAULT_SERVICES.items():
            session.add(Service(name=name, price=price, duration_minutes=duration))
        logger.info("Seeded default service catalog")

    if session.get(AdminSettings, 1) is None:
        session.add(AdminSettings(id=1))

    if ADMIN_EMAIL and ADMIN_PASSWORD:
        # login matches on the lower-cased address
        email = ADMIN_EMAIL.strip().lower()
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing is None:
            session.add(User(email=email, password_hash=hash_password(ADMIN_PASSWORD), role="admin"))
            logger.info("Created bootstrap admin %s", email)

    session.commit()
