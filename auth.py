import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Form, Header, HTTPException
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError

import config
from database import create_document, get_db
from responses import ok, to_str_id
from schemas import AuthUser

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

router = APIRouter()


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def get_user_by_email(db, email: str) -> Optional[dict]:
    return db["user"].find_one({"email": email.lower()})


def get_current_user(authorization: Optional[str] = Header(default=None), db=Depends(get_db)) -> dict:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Invalid token")
    user = get_user_by_email(db, sub)
    if not user or not user.get("is_active", True):
        raise HTTPException(status_code=401, detail="User not found")
    return user


def is_admin(user: dict) -> bool:
    return (user.get("role") or "").upper() == "ADMIN"


def require_admin(user: dict = Depends(get_current_user)) -> dict:
    if not is_admin(user):
        raise HTTPException(status_code=403, detail="Admin only")
    return user


def public_user(user: dict) -> dict:
    return {
        "id": str(user["_id"]),
        "email": user["email"],
        "display_name": user.get("display_name"),
        "role": user.get("role", "USER"),
    }


@router.post("/register", status_code=201)
def register_user(
    email: str = Form(...),
    password: str = Form(..., min_length=6),
    display_name: str = Form(...),
    db=Depends(get_db),
):
    email = email.lower()
    if get_user_by_email(db, email):
        raise HTTPException(status_code=400, detail="Email already registered")
    # Always user role; admins are promoted directly in the database
    try:
        user = AuthUser(email=email, display_name=display_name, password_hash=hash_password(password))
    except ValidationError:
        raise HTTPException(status_code=400, detail="Valid email is required")
    try:
        doc = create_document(db, "user", user)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Email already registered")
    logger.info(f"Registered user {email}")
    return ok(public_user(doc), "User registered successfully")


@router.post("/login")
def login(email: str = Form(...), password: str = Form(...), db=Depends(get_db)):
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.get("password_hash", "")):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not user.get("is_active", True):
        raise HTTPException(status_code=403, detail="Account is disabled")
    token = create_access_token({"sub": user["email"], "role": user.get("role", "USER")})
    return ok({
        "access_token": token,
        "token_type": "bearer",
        "user": public_user(user),
    })


@router.get("/me")
def me(user: dict = Depends(get_current_user)):
    return ok(to_str_id(user))
