# app/routers/appointments_routes.py

from datetime import date
from typing import Optional, List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from app.db import get_session
from app.models import Appointment
from app.schemas import AppointmentCreate, AppointmentPublic, AvailabilityResponse
from app.auth import get_current_user
from app.deps import get_dispatcher, require_role
from app.errors import StoreUnavailable
from app.core import cancel_appointment as cancel, create_appointment as book, day_availability
from app.core.timelabels import parse_label
from app.notifications import NotificationDispatcher


router = APIRouter(
    tags=["appointments"],
)


@router.get("/availability", response_model=AvailabilityResponse)
def availability(
    date: date,
    barber_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    slots = day_availability(session, date, barber_id)
    return {
        "date": date,
        "barber_id": barber_id,
        "slots": [{"time": label, "available": ok} for label, ok in slots.items()],
    }


@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    return book(
        session,
        day=appt.date,
        time=appt.time,
        client_name=appt.client_name.strip(),
        client_phone=appt.client_phone.strip(),
        service_id=appt.service_id,
        barber_id=appt.barber_id,
        notify=lambda event: background_tasks.add_task(dispatcher.dispatch, event),
    )


@router.patch("/appointments/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: int,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    require_role(current_user, "admin", "barber")

    try:
        target = session.get(Appointment, appt_id)
    except OperationalError:
        raise StoreUnavailable("cancel_appointment")
    if target is None:
        raise HTTPException(status_code=404, detail="Appointment not found")

    # Barbers may only cancel their own appointments
    if current_user["role"] == "barber" and target.barber_id != current_user["id"]:
        raise HTTPException(status_code=403, detail="Forbidden")

    return cancel(
        session,
        appt_id,
        notify=lambda event: background_tasks.add_task(dispatcher.dispatch, event),
    )


@router.get("/admin/appointments", response_model=List[AppointmentPublic])
def list_appointments(
    status: str = "active",
    on_date: Optional[date] = None,
    barber_id: Optional[int] = None,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")

    if status not in ("active", "cancelled", "all"):
        raise HTTPException(status_code=422, detail="status must be 'active', 'cancelled', or 'all'")

    stmt = select(Appointment)
    if on_date is not None:
        stmt = stmt.where(Appointment.date == on_date)
    if barber_id is not None:
        stmt = stmt.where(Appointment.barber_id == barber_id)
    if status != "all":
        stmt = stmt.where(Appointment.cancelled == (status == "cancelled"))

    appts = session.exec(stmt.order_by(Appointment.date, Appointment.id)).all()
    return sorted(appts, key=_chronological)


def _chronological(appt: Appointment):
    return appt.date, parse_label(appt.time)
