# app/auth.py

from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext


from sqlmodel import Session, select
from .config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from .db import get_session
from .models import Barber, User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")

_CREDENTIALS_ERROR = {"WWW-Authenticate": "Bearer"}


def create_access_token(data: dict, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode["exp"] = expire
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)

def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> dict:
    """Resolve the bearer token to an admin account or an active barber."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        subject = payload.get("sub")
        role = payload.get("role", "admin")
        if subject is None:
            raise HTTPException(status_code=401, detail="Invalid token", headers=_CREDENTIALS_ERROR)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token", headers=_CREDENTIALS_ERROR)

    if role == "barber":
        barber = session.get(Barber, int(subject))
        if barber is None or not barber.is_active:
            raise HTTPException(status_code=401, detail="Barber not found", headers=_CREDENTIALS_ERROR)
        return {"id": barber.id, "name": barber.name, "phone": barber.phone, "role": "barber"}

    user = session.exec(
        select(User).where(User.email == subject)
    ).first()

    if user is None:
        raise HTTPException(status_code=401, detail="User not found", headers=_CREDENTIALS_ERROR)

    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
    }
