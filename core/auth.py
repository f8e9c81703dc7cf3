"""Local mock login.

Users live in the store under ``users``.  There is no security boundary
here; passwords are still kept only as bcrypt hashes.
"""

import asyncio
import logging
from typing import List, Optional

from passlib.context import CryptContext

from core import config
from core.domain import User
from core.functional import Either, Right, failure
from core.storage import LocalStore

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, stored: str) -> bool:
    try:
        return pwd_context.verify(password, stored)
    except (ValueError, TypeError):
        # unrecognised or malformed hash in the users file
        return False


def load_users(store: LocalStore) -> List[User]:
    return [
        User(username=u["username"], password_hash=u["passwordHash"], full_name=u.get("fullName", ""))
        for u in store.get(config.USERS_KEY, [])
        if isinstance(u, dict) and "username" in u and "passwordHash" in u
    ]


def register_user(store: LocalStore, username: str, password: str, full_name: str = "") -> Either[dict, User]:
    username = (username or "").strip()
    if not username or not password:
        return failure("validation_error", "Username and password are required")
    users = load_users(store)
    if any(u.username.lower() == username.lower() for u in users):
        return failure("validation_error", f"User {username} already exists")
    user = User(username=username, password_hash=hash_password(password), full_name=full_name.strip())
    store.set(config.USERS_KEY, [
        {"username": u.username, "passwordHash": u.password_hash, "fullName": u.full_name}
        for u in users + [user]
    ])
    logger.info("Registered user %s", username)
    return Right(user)


async def authenticate(
    store: LocalStore, username: str, password: str, delay: Optional[float] = None
) -> Either[dict, User]:
    """Check credentials after a short pause (the login spinner)."""
    if not username or not password:
        return failure("validation_error", "Please fill in all fields")
    await asyncio.sleep(config.LOGIN_DELAY if delay is None else delay)
    for user in load_users(store):
        if user.username == username.strip() and verify_password(password, user.password_hash):
            logger.info("User %s logged in", user.username)
            return Right(user)
    logger.warning("Failed login for %s", username)
    return failure("auth_error", "Incorrect username or password")
