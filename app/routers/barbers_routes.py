# app/routers/barbers_routes.py

from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path
from sqlmodel import Session, select

from app.db import get_session
from app.models import Appointment, Barber, BarberSchedule, Service
from app.schemas import (
    AppointmentPublic,
    BarberPublic,
    BarberScheduleIn,
    BarberSchedulePublic,
    BlockedTimeCreate,
    BlockedTimePublic,
    HolidayCreate,
    HolidayPublic,
    ServicePublic,
)
from app.auth import get_current_user
from app.deps import require_role
from app.core.admin import add_blocked_time, add_holiday, put_barber_schedule

router = APIRouter(
    tags=["barbers"],
)


def current_barber(current_user: dict = Depends(get_current_user)) -> dict:
    require_role(current_user, "barber")
    return current_user


@router.get("/services", response_model=List[ServicePublic])
def list_services(session: Session = Depends(get_session)):
    return session.exec(select(Service).order_by(Service.id)).all()


@router.get("/barbers", response_model=List[BarberPublic])
def list_barbers(session: Session = Depends(get_session)):
    barbers = session.exec(
        select(Barber).where(Barber.is_active == True).order_by(Barber.id)  # noqa: E712
    ).all()
    # Phone numbers stay private on the public listing
    return [{"id": b.id, "name": b.name, "is_active": b.is_active} for b in barbers]


@router.get("/barbers/me/appointments", response_model=List[AppointmentPublic])
def list_my_appointments(
    on_date: Optional[date] = None,
    include_cancelled: bool = False,
    session: Session = Depends(get_session),
    barber: dict = Depends(current_barber),
):
    stmt = select(Appointment).where(Appointment.barber_id == barber["id"])
    if on_date is not None:
        stmt = stmt.where(Appointment.date == on_date)
    if not include_cancelled:
        stmt = stmt.where(Appointment.cancelled == False)  # noqa: E712
    return session.exec(stmt.order_by(Appointment.date, Appointment.id)).all()


@router.get("/barbers/me/schedule", response_model=List[BarberSchedulePublic])
def get_my_schedule(
    session: Session = Depends(get_session),
    barber: dict = Depends(current_barber),
):
    return session.exec(
        select(BarberSchedule)
        .where(BarberSchedule.barber_id == barber["id"])
        .order_by(BarberSchedule.day_of_week)
    ).all()


@router.put("/barbers/me/schedule/{day_of_week}", response_model=BarberSchedulePublic)
def set_my_schedule(
    day_of_week: Annotated[int, Path(ge=0, le=6)],
    schedule: BarberScheduleIn,
    session: Session = Depends(get_session),
    barber: dict = Depends(current_barber),
):
    return put_barber_schedule(session, barber["id"], day_of_week, schedule)


@router.post("/barbers/me/blocked-times", response_model=BlockedTimePublic, status_code=201)
def block_my_time(
    block: BlockedTimeCreate,
    session: Session = Depends(get_session),
    barber: dict = Depends(current_barber),
):
    # A barber can only block their own calendar
    return add_blocked_time(session, block.model_copy(update={"barber_id": barber["id"]}))


@router.post("/barbers/me/holidays", response_model=HolidayPublic, status_code=201)
def add_my_holiday(
    holiday: HolidayCreate,
    session: Session = Depends(get_session),
    barber: dict = Depends(current_barber),
):
    return add_holiday(session, holiday.model_copy(update={"barber_id": barber["id"]}))
