# app/routers/admin_routes.py

import re
from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.db import get_session
from app.models import Barber, BarberSchedule, BlockedTime, BusinessHours, Holiday, Service
from app.schemas import (
    AdminSettingsIn,
    AdminSettingsPublic,
    BarberCreate,
    BarberPublic,
    BarberScheduleIn,
    BarberSchedulePublic,
    BarberUpdate,
    BlockedTimeCreate,
    BlockedTimePublic,
    BusinessHoursIn,
    BusinessHoursPublic,
    HolidayCreate,
    HolidayPublic,
    ServiceCreate,
    ServicePublic,
    StatisticsResponse,
)
from app.auth import get_current_user, hash_password
from app.deps import require_role
from app.core import get_admin_settings
from app.core.admin import (
    add_blocked_time,
    add_holiday,
    delete_row,
    put_barber_schedule,
    put_business_hours,
    put_settings,
)
from app.statistics import monthly_statistics


def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    require_role(current_user, "admin")
    return current_user


router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)

DayOfWeek = Annotated[int, Path(ge=0, le=6, description="0=Sunday ... 6=Saturday")]


# Services

@router.get("/services", response_model=List[ServicePublic])
def list_services(session: Session = Depends(get_session)):
    return session.exec(select(Service).order_by(Service.id)).all()


@router.post("/services", response_model=ServicePublic, status_code=201)
def create_service(service: ServiceCreate, session: Session = Depends(get_session)):
    db_service = Service(**service.model_dump())
    session.add(db_service)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="A service with that name already exists")
    session.refresh(db_service)
    return db_service


@router.put("/services/{service_id}", response_model=ServicePublic)
def update_service(service_id: int, service: ServiceCreate, session: Session = Depends(get_session)):
    db_service = session.get(Service, service_id)
    if db_service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    for field, value in service.model_dump().items():
        setattr(db_service, field, value)
    session.add(db_service)
    session.commit()
    session.refresh(db_service)
    return db_service


# Barbers

@router.get("/barbers", response_model=List[BarberPublic])
def list_barbers(include_inactive: bool = False, session: Session = Depends(get_session)):
    stmt = select(Barber).order_by(Barber.id)
    if not include_inactive:
        stmt = stmt.where(Barber.is_active == True)  # noqa: E712
    return session.exec(stmt).all()


@router.post("/barbers", response_model=BarberPublic, status_code=201)
def create_barber(barber: BarberCreate, session: Session = Depends(get_session)):
    db_barber = Barber(
        name=barber.name.strip(),
        phone=barber.phone.strip(),
        access_key_hash=hash_password(barber.access_key),
    )
    session.add(db_barber)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="A barber with that phone already exists")
    session.refresh(db_barber)
    return db_barber


@router.patch("/barbers/{barber_id}", response_model=BarberPublic)
def update_barber(barber_id: int, changes: BarberUpdate, session: Session = Depends(get_session)):
    db_barber = session.get(Barber, barber_id)
    if db_barber is None:
        raise HTTPException(status_code=404, detail="Barber not found")

    updates = changes.model_dump(exclude_unset=True)
    access_key = updates.pop("access_key", None)
    if access_key:
        db_barber.access_key_hash = hash_password(access_key)
    for field, value in updates.items():
        if value is not None:
            setattr(db_barber, field, value)

    session.add(db_barber)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="A barber with that phone already exists")
    session.refresh(db_barber)
    return db_barber


@router.delete("/barbers/{barber_id}", response_model=BarberPublic)
def deactivate_barber(barber_id: int, session: Session = Depends(get_session)):
    # Soft delete keeps appointment history pointing at a real barber
    db_barber = session.get(Barber, barber_id)
    if db_barber is None:
        raise HTTPException(status_code=404, detail="Barber not found")
    db_barber.is_active = False
    session.add(db_barber)
    session.commit()
    session.refresh(db_barber)
    return db_barber


# Weekly hours

@router.get("/business-hours", response_model=List[BusinessHoursPublic])
def list_business_hours(session: Session = Depends(get_session)):
    return session.exec(select(BusinessHours).order_by(BusinessHours.day_of_week)).all()


@router.put("/business-hours/{day_of_week}", response_model=BusinessHoursPublic)
def set_business_hours(
    day_of_week: DayOfWeek,
    hours: BusinessHoursIn,
    session: Session = Depends(get_session),
):
    return put_business_hours(session, day_of_week, hours)


@router.get("/barbers/{barber_id}/schedule", response_model=List[BarberSchedulePublic])
def list_barber_schedule(barber_id: int, session: Session = Depends(get_session)):
    return session.exec(
        select(BarberSchedule)
        .where(BarberSchedule.barber_id == barber_id)
        .order_by(BarberSchedule.day_of_week)
    ).all()


@router.put("/barbers/{barber_id}/schedule/{day_of_week}", response_model=BarberSchedulePublic)
def set_barber_schedule(
    barber_id: int,
    day_of_week: DayOfWeek,
    schedule: BarberScheduleIn,
    session: Session = Depends(get_session),
):
    return put_barber_schedule(session, barber_id, day_of_week, schedule)


# Holidays and blocked times

@router.get("/holidays", response_model=List[HolidayPublic])
def list_holidays(on_date: Optional[date] = None, session: Session = Depends(get_session)):
    stmt = select(Holiday).order_by(Holiday.date)
    if on_date is not None:
        stmt = stmt.where(Holiday.date == on_date)
    return session.exec(stmt).all()


@router.post("/holidays", response_model=HolidayPublic, status_code=201)
def create_holiday(holiday: HolidayCreate, session: Session = Depends(get_session)):
    return add_holiday(session, holiday)


@router.delete("/holidays/{holiday_id}", status_code=204)
def delete_holiday(holiday_id: int, session: Session = Depends(get_session)):
    delete_row(session, Holiday, holiday_id)


@router.get("/blocked-times", response_model=List[BlockedTimePublic])
def list_blocked_times(on_date: Optional[date] = None, session: Session = Depends(get_session)):
    stmt = select(BlockedTime).order_by(BlockedTime.date, BlockedTime.id)
    if on_date is not None:
        stmt = stmt.where(BlockedTime.date == on_date)
    return session.exec(stmt).all()


@router.post("/blocked-times", response_model=BlockedTimePublic, status_code=201)
def create_blocked_time(block: BlockedTimeCreate, session: Session = Depends(get_session)):
    return add_blocked_time(session, block)


@router.delete("/blocked-times/{block_id}", status_code=204)
def delete_blocked_time(block_id: int, session: Session = Depends(get_session)):
    delete_row(session, BlockedTime, block_id)


# Settings and statistics

@router.get("/settings", response_model=AdminSettingsPublic)
def read_settings(session: Session = Depends(get_session)):
    return get_admin_settings(session)


@router.put("/settings", response_model=AdminSettingsPublic)
def update_settings(settings: AdminSettingsIn, session: Session = Depends(get_session)):
    return put_settings(session, settings)


@router.get("/statistics", response_model=StatisticsResponse)
def statistics(month: str, session: Session = Depends(get_session)):
    match = re.match(r"^([1-9]\d{3})-(0[1-9]|1[0-2])$", month)
    if match is None:
        raise HTTPException(status_code=422, detail="month must be formatted as YYYY-MM")
    return monthly_statistics(session, int(match.group(1)), int(match.group(2)))
