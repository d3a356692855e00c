# app/schemas.py

from pydantic import BaseModel, Field, field_validator
from enum import Enum
from datetime import datetime, date
from typing import List, Optional

from app.core.timelabels import parse_label, sort_labels, validate_clock


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class UserRole(str, Enum):
    admin = "admin"
    barber = "barber"

class UserPublic(BaseModel):
    id: int
    email: Optional[str] = None
    name: Optional[str] = None
    role: UserRole

class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)

class BarberLogin(BaseModel):
    phone: str
    access_key: str


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    price: int = Field(ge=0)
    duration_minutes: int = Field(default=45, gt=0)

class ServicePublic(ServiceCreate):
    id: int


class BarberCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=7)
    access_key: str = Field(min_length=4, max_length=72)

class BarberUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    access_key: Optional[str] = Field(default=None, min_length=4, max_length=72)
    is_active: Optional[bool] = None

class BarberPublic(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    is_active: bool = True


class _Hours(BaseModel):
    morning_start: Optional[str] = None
    morning_end: Optional[str] = None
    afternoon_start: Optional[str] = None
    afternoon_end: Optional[str] = None

    @field_validator("morning_start", "morning_end", "afternoon_start", "afternoon_end")
    @classmethod
    def _clock(cls, value):
        return validate_clock(value)

class BusinessHoursIn(_Hours):
    is_open: bool = True

class BusinessHoursPublic(BusinessHoursIn):
    day_of_week: int

class BarberScheduleIn(_Hours):
    is_available: bool = True

class BarberSchedulePublic(BarberScheduleIn):
    barber_id: int
    day_of_week: int


class HolidayCreate(BaseModel):
    date: date
    description: str = Field(min_length=1)
    barber_id: Optional[int] = None

class HolidayPublic(HolidayCreate):
    id: int


class BlockedTimeCreate(BaseModel):
    date: date
    time_slots: List[str] = Field(min_length=1)
    reason: str = ""
    barber_id: Optional[int] = None

    @field_validator("time_slots")
    @classmethod
    def _labels(cls, value):
        return sort_labels(value)

class BlockedTimePublic(BlockedTimeCreate):
    id: int


class AdminSettingsIn(BaseModel):
    early_booking_restriction_enabled: bool = False
    early_booking_hours: int = Field(default=12, ge=0, le=168)
    restricted_hours: List[str] = Field(default_factory=list)
    multiple_barbers_enabled: bool = False
    default_barber_id: Optional[int] = None
    reviews_enabled: bool = False

    @field_validator("restricted_hours")
    @classmethod
    def _labels(cls, value):
        return sort_labels(value)

class AdminSettingsPublic(AdminSettingsIn):
    updated_at: Optional[datetime] = None


class AppointmentCreate(BaseModel):
    date: date
    time: str
    client_name: str = Field(min_length=1)
    client_phone: str = Field(min_length=7)
    service_id: int
    barber_id: Optional[int] = None

    @field_validator("time")
    @classmethod
    def _label(cls, value):
        parse_label(value)
        return value

class AppointmentPublic(BaseModel):
    id: int
    date: date
    time: str
    client_name: str
    client_phone: str
    service_id: int
    barber_id: Optional[int] = None
    confirmed: bool
    cancelled: bool
    cancelled_at: Optional[datetime] = None
    created_at: datetime


class SlotPublic(BaseModel):
    time: str
    available: bool

class AvailabilityResponse(BaseModel):
    date: date
    barber_id: Optional[int] = None
    slots: List[SlotPublic]


class ServiceStat(BaseModel):
    service: str
    count: int
    percentage: float
    revenue: int

class HourStat(BaseModel):
    hour: str
    count: int
    percentage: float

class StatisticsResponse(BaseModel):
    month: str
    total_appointments: int = 0
    total_revenue: int = 0
    average_daily: float = 0.0
    growth_rate: float = 0.0
    most_popular_service: Optional[str] = None
    most_popular_hour: Optional[str] = None
    services: List[ServiceStat] = Field(default_factory=list)
    hours: List[HourStat] = Field(default_factory=list)
