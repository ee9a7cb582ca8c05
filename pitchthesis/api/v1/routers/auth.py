# pitchthesis/api/v1/routers/auth.py
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from pitchthesis.api.v1.deps import get_settings
from pitchthesis.api.v1.schemas import RegisterReq, LoginReq, TokenResp, User
from pitchthesis.config import Settings
from pitchthesis.core.logging import get_logger
from pitchthesis.core.security import verify_password, create_access_token, decode_token
from pitchthesis.db.core import get_session
from pitchthesis.repositories.users import get_user_by_username, create_user

log = get_logger("auth")

router = APIRouter(tags=["auth"])


# ------------ Routes ------------
@router.post("/register", response_class=PlainTextResponse, status_code=201)
def register(req: RegisterReq, db: Session = Depends(get_session)):
    if get_user_by_username(db, req.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    try:
        create_user(db, req.username, req.password)
    except IntegrityError:
        # lost a race with a concurrent register for the same name
        db.rollback()
        raise HTTPException(status_code=400, detail="Username already exists")
    log.info("user_registered", extra={"username": req.username})
    return "User registered successfully"


@router.post("/login", response_model=TokenResp)
def login(
    req: LoginReq,
    db: Session = Depends(get_session),
    cfg: Settings = Depends(get_settings),
):
    """
    Body: { "username": "...", "password": "..." }
    Returns: { token }  (bearer, 24h)
    """
    u = get_user_by_username(db, req.username)
    if not u or not verify_password(req.password, u.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return TokenResp(token=create_access_token(u.username, cfg))


# ------------ Current user ------------
def _user_from_header(authorization: Optional[str], db: Session, cfg: Settings) -> User:
    if not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    token = authorization.split(" ", 1)[1]
    try:
        username = decode_token(token, cfg).get("sub")
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token")
    u = get_user_by_username(db, username or "")
    if not u:
        raise HTTPException(status_code=401, detail="User not found")
    return User(id=u.id, username=u.username)


async def get_current_user(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_session),
    cfg: Settings = Depends(get_settings),
) -> User:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    return await run_in_threadpool(_user_from_header, authorization, db, cfg)


async def get_optional_user(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_session),
    cfg: Settings = Depends(get_settings),
) -> Optional[User]:
    """
    Anonymous when no Authorization header is sent; a bad token is still a 401.
    """
    if not authorization:
        return None
    return await run_in_threadpool(_user_from_header, authorization, db, cfg)


@router.get("/me", response_model=User)
def me(user: User = Depends(get_current_user)):
    return user
