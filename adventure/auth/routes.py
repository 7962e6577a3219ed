from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from adventure.db.session import get_db
from adventure.auth.models import User
from adventure.core.deps import get_current_user
from adventure.core.security import hash_password, verify_password, create_access_token

router = APIRouter(prefix="/api", tags=["auth"])


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    username: str
    password: str


def _public_user(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "level": user.level,
        "score": user.score,
    }


# =========================
# REGISTER
# =========================
@router.post("/register")
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    username = body.username.strip()
    email = body.email.strip()
    if not username or not email or not body.password:
        raise HTTPException(status_code=400, detail="Username, email and password are required")

    if db.query(User).filter((User.username == username) | (User.email == email)).first():
        raise HTTPException(status_code=400, detail="Username or email already exists")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(body.password),
        level=1,
        score=0,
    )

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Username or email already exists")
    db.refresh(user)

    print(f"[AUTH] Registered user={user.id} username={user.username}", flush=True)
    token = create_access_token({"sub": user.username})
    return {"token": token, "user": _public_user(user)}


# =========================
# LOGIN
# =========================
@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    # Accept either username or email
    user = db.query(User).filter(User.username == body.username).first()
    if not user:
        user = db.query(User).filter(User.email == body.username).first()

    if not user:
        print("[AUTH] Unknown user for login", flush=True)
        raise HTTPException(status_code=400, detail="User not found")

    if not verify_password(body.password, user.password_hash):
        print(f"[AUTH] Invalid password for: {user.username}", flush=True)
        raise HTTPException(status_code=400, detail="Invalid password")

    token = create_access_token({"sub": user.username})
    print(f"[AUTH] Login successful for: {user.username}", flush=True)
    return {"token": token, "user": _public_user(user)}


# =========================
# PROFILE
# =========================
@router.get("/profile")
def profile(user: User = Depends(get_current_user)):
    return _public_user(user)
