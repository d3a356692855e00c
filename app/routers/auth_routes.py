# app/routers/auth_routes.py

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from app.db import get_session
from app.models import Barber, User
from app.schemas import BarberLogin, Token
from app.auth import verify_password, create_access_token

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    # OAuth2 "password" flow uses the "username" field for the email
    email = form_data.username.strip().lower()
    password = form_data.password

    user = session.exec(
        select(User).where(User.email == email)
    ).first()

    if user is None or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": user.email, "role": user.role})
    return {"access_token": token, "token_type": "bearer"}


@router.post("/barber-login", response_model=Token)
def barber_login(
    credentials: BarberLogin,
    session: Session = Depends(get_session),
):
    barber = session.exec(
        select(Barber).where(Barber.phone == credentials.phone.strip())
    ).first()

    if barber is None or not barber.is_active or not verify_password(credentials.access_key, barber.access_key_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": str(barber.id), "role": "barber"})
    return {"access_token": token, "token_type": "bearer"}
