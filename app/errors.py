# app/errors.py

from datetime import date
from typing import Optional


class BookingError(Exception):
    """Base class for errors the API reports to the caller."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def context(self) -> dict:
        return {}


class InvalidTimeFormat(BookingError, ValueError):
    status_code = 422


class NoBarberResolved(BookingError):
    status_code = 422

    def __init__(self, message: str = "A barber must be selected"):
        super().__init__(message)


class NotFound(BookingError):
    status_code = 404


class Conflict(BookingError):
    status_code = 409


class StoreUnavailable(BookingError):
    status_code = 503

    def __init__(self, operation: str):
        super().__init__("The booking store is unavailable, please try again")
        self.operation = operation


class _SlotError(BookingError):
    status_code = 409

    def __init__(self, message: str, day: date, time: str, barber_id: Optional[int]):
        super().__init__(message)
        self.date = day
        self.time = time
        self.barber_id = barber_id

    def context(self) -> dict:
        return {"date": self.date.isoformat(), "time": self.time, "barber_id": self.barber_id}


class SlotUnavailable(_SlotError):
    def __init__(self, day: date, time: str, barber_id: Optional[int], reason: str = "Slot is not available"):
        super().__init__(f"{reason}, please pick another time", day, time, barber_id)


class DuplicateSlot(_SlotError):
    def __init__(self, day: date, time: str, barber_id: Optional[int]):
        super().__init__("Slot was just booked by someone else, please pick another time", day, time, barber_id)
