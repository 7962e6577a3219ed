from typing import Optional

from fastapi import Request, Depends, HTTPException
from sqlalchemy.orm import Session

from adventure.db.session import get_db
from adventure.auth.models import User
from adventure.core.security import decode_access_token


def _extract_token(request: Request) -> Optional[str]:
    """Bearer header first, then the access_token cookie."""
    auth_header = request.headers.get("authorization")
    if auth_header:
        scheme, _, value = auth_header.partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            return value.strip()

    token = request.cookies.get("access_token")
    if token and token.lower().startswith("bearer "):
        token = token[7:].strip()
    return token or None


def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    token = _extract_token(request)

    if not token:
        print(f"[AUTH] reject reason=missing_token path={request.url.path}", flush=True)
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_access_token(token)
    if not payload:
        print(f"[AUTH] reject reason=invalid_token path={request.url.path}", flush=True)
        raise HTTPException(status_code=401, detail="Invalid token")

    username = payload.get("sub")
    if not username:
        print(f"[AUTH] reject reason=no_username_in_token path={request.url.path}", flush=True)
        raise HTTPException(status_code=401, detail="Invalid token payload")

    user = db.query(User).filter(User.username == username).first()

    if not user:
        print(f"[AUTH] reject reason=user_not_found username={username} path={request.url.path}", flush=True)
        raise HTTPException(status_code=401, detail="User not found")

    return user
