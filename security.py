from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from database import Store, get_store
from errors import AuthenticationError, Unauthorized, ValidationError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

MIN_PASSWORD_LENGTH = 6


def verify_password_policy(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def hash_password(password: str) -> str:
    verify_password_policy(password)
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried by a token."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise AuthenticationError("Not authorized to access this route") from exc
    user_id = payload.get("sub")
    if user_id is None:
        raise AuthenticationError("Not authorized to access this route")
    return user_id


def public_user(user: dict) -> dict:
    return {k: v for k, v in user.items() if k != "password_hash"}


def get_current_user(token: Optional[str] = Depends(oauth2_scheme), store: Store = Depends(get_store)):
    if not token:
        raise AuthenticationError("Not authorized to access this route")
    user = store.users.find_by_id(decode_access_token(token))
    if not user:
        raise AuthenticationError("Not authorized to access this route")
    return user


def require_role(*roles: str):
    def role_dep(current_user=Depends(get_current_user)):
        if current_user.get("role") not in roles:
            raise Unauthorized(f"User role {current_user.get('role')} is not authorized to access this route")
        return current_user
    return role_dep
