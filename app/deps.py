# app/deps.py

from fastapi import HTTPException

from app.notifications import NotificationDispatcher

_dispatcher = NotificationDispatcher()


def require_role(user: dict, *roles: str):
    if user["role"] not in roles:
        raise HTTPException(status_code=403, detail="Forbidden")


def get_dispatcher() -> NotificationDispatcher:
    return _dispatcher
