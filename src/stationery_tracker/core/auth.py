"""
Users, roles and the current login session.
"""

from dataclasses import asdict, dataclass
from enum import Enum
import hashlib
import hmac
import logging
import secrets

from .. import settings
from ..clients.device_storage import KeyValueStorage, read_or_default, remove_quietly, write_quietly
from ..errors import AuthError, DuplicateUserError, ProtectedUserError, SelfDeletionError

logger = logging.getLogger(__name__)

_ITERATIONS = 100_000


def hash_password(password: str, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(8)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), _ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    salt, _, _ = password_hash.partition("$")
    return hmac.compare_digest(hash_password(password, salt), password_hash)


class UserRole(str, Enum):
    ADMIN = "Admin"
    USER = "User"


@dataclass
class User:
    id: str
    username: str
    password_hash: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    def to_dict(self) -> dict:
        return {**asdict(self), "role": self.role.value}

    @classmethod
    def from_dict(cls, raw: dict) -> "User":
        role = UserRole.ADMIN if raw.get("role") == UserRole.ADMIN.value else UserRole.USER
        return cls(
            id=str(raw["id"]),
            username=str(raw["username"]),
            password_hash=str(raw["password_hash"]),
            role=role,
        )


class AuthStore:
    """
    User list and session, loaded from storage at construction.

    The primary admin account is recreated if missing and can never be deleted.
    """

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage
        self._users = self._load_users()
        self._current_user_id = read_or_default(storage, settings.SESSION_KEY)
        if self.current_user is None:
            self._current_user_id = None

    def _default_admin(self) -> User:
        return User(
            id="default-admin",
            username=settings.DEFAULT_ADMIN_USERNAME,
            password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
            role=UserRole.ADMIN,
        )

    def _load_users(self) -> list[User]:
        users = []
        saved = read_or_default(self.storage, settings.USERS_KEY, [])
        for raw in saved if isinstance(saved, list) else []:
            try:
                users.append(User.from_dict(raw))
            except (AttributeError, KeyError, TypeError):
                logger.warning("Skipping unreadable saved user: %r", raw)

        if not any(u.username == settings.DEFAULT_ADMIN_USERNAME for u in users):
            users.append(self._default_admin())
        return users

    def _save_users(self) -> None:
        write_quietly(self.storage, settings.USERS_KEY, [u.to_dict() for u in self._users])

    def _save_session(self) -> None:
        if self._current_user_id:
            write_quietly(self.storage, settings.SESSION_KEY, self._current_user_id)
        else:
            remove_quietly(self.storage, settings.SESSION_KEY)

    @property
    def users(self) -> list[User]:
        return list(self._users)

    @property
    def current_user(self) -> User | None:
        """The last saved login; each UI session starts from it."""
        return self.find_user(self._current_user_id)

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def find_user(self, user_id: str | None) -> User | None:
        return next((u for u in self._users if u.id == user_id), None)

    def login(self, username: str, password: str) -> User | None:
        """Check credentials and save the session. Returns the user, or None."""
        user = next(
            (u for u in self._users if u.username.lower() == username.strip().lower()),
            None,
        )
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for '%s'", username)
            return None
        self._current_user_id = user.id
        self._save_session()
        return user

    def logout(self) -> None:
        self._current_user_id = None
        self._save_session()

    def add_user(self, username: str, password: str, role: UserRole = UserRole.USER) -> User:
        username = username.strip()
        if not username or not password.strip():
            raise AuthError("Username and password cannot be empty.")
        if any(u.username.lower() == username.lower() for u in self._users):
            raise DuplicateUserError(username)

        user = User(
            id=secrets.token_hex(8),
            username=username,
            password_hash=hash_password(password),
            role=UserRole(role),
        )
        self._users.append(user)
        self._save_users()
        return user

    def delete_user(self, user_id: str, acting_user_id: str | None = None) -> None:
        """
        Remove a user.

        acting_user_id is whoever asked for the deletion (the saved session
        when omitted); nobody can delete their own account.
        """
        user = self.find_user(user_id)
        if user is None:
            return
        if user.username == settings.DEFAULT_ADMIN_USERNAME:
            raise ProtectedUserError()
        if user_id == (acting_user_id or self._current_user_id):
            raise SelfDeletionError()
        self._users = [u for u in self._users if u.id != user_id]
        if self._current_user_id == user_id:
            self.logout()
        self._save_users()
