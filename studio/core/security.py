from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from time import time

from studio.core.config import settings

ALGORITHM = "HS256"
_RATE_LIMIT_STORE = {}

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=ALGORITHM,
    )


#Returns None when the token is invalid or expired
def decode_access_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


#Sliding window limiter kept in process memory
def rate_limit(key: str, max_requests: int, window_seconds: int) -> bool:
    if not settings.RATE_LIMIT_ENABLED:
        return True

    now = time()
    _evict_expired(now)

    _, timestamps = _RATE_LIMIT_STORE.get(key, (window_seconds, []))
    timestamps = [t for t in timestamps if now - t < window_seconds]

    if len(timestamps) >= max_requests:
        _RATE_LIMIT_STORE[key] = (window_seconds, timestamps)
        return False

    timestamps.append(now)
    _RATE_LIMIT_STORE[key] = (window_seconds, timestamps)
    return True


#Drop keys whose most recent request has left its window
def _evict_expired(now: float):
    for key, (window_seconds, timestamps) in list(_RATE_LIMIT_STORE.items()):
        if not timestamps or now - timestamps[-1] >= window_seconds:
            del _RATE_LIMIT_STORE[key]


def make_key(request, endpoint: str) -> str:
    ip = request.client.host if request.client else "unknown"
    return f"{endpoint}:{ip}"


def reset_rate_limits():
    _RATE_LIMIT_STORE.clear()
