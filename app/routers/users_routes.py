# app/routers/users_routes.py

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from app.db import get_session
from app.models import User
from app.schemas import UserCreate, UserPublic
from app.auth import get_current_user, hash_password
from app.deps import require_role

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    # admins carry an email, barbers a name
    return UserPublic(
        id=current_user["id"],
        email=current_user.get("email"),
        name=current_user.get("name"),
        role=current_user["role"],
    )


@router.post("/users", status_code=201, response_model=UserPublic)
def create_admin(
    user: UserCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")

    email = user.email.strip().lower()
    if session.exec(select(User).where(User.email == email)).first() is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    admin = User(email=email, password_hash=hash_password(user.password), role="admin")
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return UserPublic(id=admin.id, email=admin.email, role=admin.role)
