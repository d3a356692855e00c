# app/models.py

from typing import Optional, List
from datetime import datetime, date as Date

from sqlalchemy import DateTime, Index, UniqueConstraint, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column

# Owner value used for slots and holidays that belong to the whole shop
# rather than one barber. NULL cannot be used because SQL unique indexes
# treat NULLs as distinct.
SHOP_OWNER = 0


def owner_key(barber_id: Optional[int]) -> int:
    return barber_id if barber_id is not None else SHOP_OWNER


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True)
    price: int
    duration_minutes: int = 45


class Barber(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    phone: str = Field(index=True, unique=True)
    access_key_hash: str
    is_active: bool = True


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str = "admin"


class BusinessHours(SQLModel, table=True):
    day_of_week: int = Field(primary_key=True)  # 0=Sunday ... 6=Saturday
    is_open: bool = True
    morning_start: Optional[str] = None
    morning_end: Optional[str] = None
    afternoon_start: Optional[str] = None
    afternoon_end: Optional[str] = None


class BarberSchedule(SQLModel, table=True):
    barber_id: int = Field(foreign_key="barber.id", primary_key=True)
    day_of_week: int = Field(primary_key=True)
    is_available: bool = True
    morning_start: Optional[str] = None
    morning_end: Optional[str] = None
    afternoon_start: Optional[str] = None
    afternoon_end: Optional[str] = None


class Holiday(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("date", "barber_owner", name="uq_holiday_date_owner"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    date: Date = Field(index=True)
    description: str
    barber_id: Optional[int] = Field(default=None, foreign_key="barber.id")
    barber_owner: int = SHOP_OWNER


class BlockedTime(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    date: Date = Field(index=True)
    time_slots: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    reason: str = ""
    barber_id: Optional[int] = Field(default=None, foreign_key="barber.id")


class Appointment(SQLModel, table=True):
    # At most one live appointment per (date, time, owner); cancelled rows
    # drop out of the index so the slot can be booked again.
    __table_args__ = (
        Index(
            "uq_appointment_active_slot",
            "date",
            "time",
            "slot_owner",
            unique=True,
            sqlite_where=text("cancelled = 0"),
            postgresql_where=text("cancelled = false"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    date: Date = Field(index=True)
    time: str
    client_name: str
    client_phone: str
    service_id: int = Field(foreign_key="service.id")
    barber_id: Optional[int] = Field(default=None, foreign_key="barber.id")
    slot_owner: int = SHOP_OWNER
    confirmed: bool = True
    cancelled: bool = False
    # Shop wall-clock times, stored without tzinfo
    cancelled_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
    created_at: datetime = Field(sa_column=Column(DateTime, nullable=False))


class AdminSettings(SQLModel, table=True):
    id: int = Field(default=1, primary_key=True)
    early_booking_restriction_enabled: bool = False
    early_booking_hours: int = 12
    restricted_hours: List[str] = Field(
        default_factory=lambda: ["7:00 AM", "8:00 AM"], sa_column=Column(JSON)
    )
    multiple_barbers_enabled: bool = False
    default_barber_id: Optional[int] = None
    reviews_enabled: bool = False
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
