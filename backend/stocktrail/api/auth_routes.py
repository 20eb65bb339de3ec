# backend/stocktrail/api/auth_routes.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel
from sqlalchemy.orm import Session

from stocktrail.api.deps import CurrentUser, get_db, get_current_user
from stocktrail.core.security import verify_password, create_access_token
from stocktrail.models.user import User

router = APIRouter()


class LoginIn(BaseModel):
    username: str
    password: str


class UserOut(BaseModel):
    id: int
    username: str
    name: str
    role: str

    class Config:
        from_attributes = True


class LoginOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


def _authenticate(db: Session, username: Optional[str], password: Optional[str]) -> LoginOut:
    username = (username or "").strip()

    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password or "", user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect username or password")

    token = create_access_token({"sub": str(user.id), "role": user.role})

    return LoginOut(
        access_token=token,
        user=UserOut.model_validate(user),
    )


# JSON login, used by the frontend
@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    return _authenticate(db, payload.username, payload.password)


# OAuth2 form endpoint (Swagger Authorize uses this)
@router.post("/token", response_model=LoginOut)
def token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    return _authenticate(db, form_data.username, form_data.password)


@router.get("/me", response_model=UserOut)
def me(current_user: CurrentUser = Depends(get_current_user)):
    return UserOut.model_validate(current_user.model_dump())
