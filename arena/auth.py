import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlmodel import Session, select

from arena.config import Settings, get_settings
from arena.db import get_session
from arena.models import User
from arena.schemas import LoginRequest, RegisterRequest, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
ALGORITHM = "HS256"
COOKIE_NAME = "access_token"


def create_access_token(data: dict, settings: Settings):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def get_user_by_username(session: Session, username: str) -> Optional[User]:
    return session.exec(select(User).where(User.username == username)).first()


def authenticate_user(session: Session, username: str, password: str):
    user = get_user_by_username(session, username)
    if not user:
        return False
    if not verify_password(password, user.password_hash):
        return False
    return user


def get_current_user(request: Request, session: Session = Depends(get_session)) -> Optional[User]:
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        return None
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None
    username: str = payload.get("sub")
    if username is None:
        return None
    return get_user_by_username(session, username)


def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


def require_admin(user: User = Depends(require_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


def to_user_read(user: User) -> UserRead:
    return UserRead.model_validate(user, from_attributes=True)


def set_session_cookie(response: Response, user: User, settings: Settings):
    token = create_access_token(data={"sub": user.username}, settings=settings)
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )


def init_admin(session: Session, settings: Settings):
    """Make sure the configured admin account exists and has admin rights."""
    admin = get_user_by_username(session, settings.admin_username)
    if admin is None:
        admin = User(
            username=settings.admin_username,
            password_hash=get_password_hash(settings.admin_password),
            display_name="Admin",
            is_admin=True,
        )
        logger.info(f"Created admin account '{settings.admin_username}'")
    elif not admin.is_admin:
        admin.is_admin = True
        logger.warning(f"Promoted existing user '{settings.admin_username}' to admin")
    session.add(admin)
    session.commit()


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    if get_user_by_username(session, body.username):
        raise HTTPException(status_code=400, detail="Username already registered")

    user = User(
        username=body.username,
        email=body.email,
        password_hash=get_password_hash(body.password),
        display_name=body.username,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"Registered user '{user.username}'")

    set_session_cookie(response, user, settings)
    return to_user_read(user)


@router.post("/login", response_model=UserRead)
def login(
    body: LoginRequest,
    response: Response,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    user = authenticate_user(session, body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    set_session_cookie(response, user, settings)
    return to_user_read(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response):
    response.delete_cookie(key=COOKIE_NAME)


@router.get("/user", response_model=UserRead)
def current_user(user: User = Depends(require_user)):
    return to_user_read(user)
