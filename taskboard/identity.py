import enum
import logging
import random
from typing import List, Optional
from uuid import uuid4

from .schemas import ErrorKind, LoginFormData, OperationResult, Role, SignupFormData, User
from .storage import USERS, DocumentStorage, validate_records

logger = logging.getLogger(__name__)

AVATAR_URL = "https://source.unsplash.com/random/100x100/?portrait,{n}"


class AuthState(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


def generate_id() -> str:
    return str(uuid4())


def random_avatar() -> str:
    return AVATAR_URL.format(n=random.randint(0, 99))


class IdentityProvider:
    """Tracks who is signed in.

    The session token is the user's id, persisted through ``DocumentStorage``
    so ``check_auth`` can restore the session after a restart.
    """

    def __init__(self, storage: DocumentStorage) -> None:
        self._storage = storage
        self.user: Optional[User] = None
        self.state = AuthState.UNAUTHENTICATED

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == Role.ADMIN

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.AUTHENTICATED

    @property
    def loading(self) -> bool:
        return self.state == AuthState.AUTHENTICATING

    # ---- user directory ----

    @property
    def users(self) -> List[User]:
        return validate_records(User, self._storage.get(USERS), USERS)

    def get_user(self, user_id: str) -> Optional[User]:
        record = self._storage.find(USERS, user_id)
        if record is None:
            return None
        found = validate_records(User, [record], USERS)
        return found[0] if found else None

    def find_user_by_email(self, email: str) -> Optional[User]:
        for user in self.users:
            if user.email == email:
                return user
        return None

    # ---- transitions ----

    def _set_user(self, user: Optional[User]) -> None:
        self.user = user
        self.state = AuthState.AUTHENTICATED if user is not None else AuthState.UNAUTHENTICATED

    def check_auth(self) -> None:
        """Restore the session from the stored token; drop a stale token."""
        self.state = AuthState.AUTHENTICATING
        try:
            user_id = self._storage.get_token()
            user = self.get_user(user_id) if user_id else None
            if user_id and user is None:
                logger.info("Discarding stale session token user_id=%s", user_id)
                self._storage.remove_token()
        except Exception:
            logger.exception("Failed to restore session")
            user = None
        self._set_user(user)

    def login(self, email: str, password: str) -> OperationResult:
        # Passwords are not checked: users carry no stored credential.
        previous = self.user
        self.state = AuthState.AUTHENTICATING
        try:
            user = self.find_user_by_email(email)
            if user is None:
                self._set_user(previous)
                return OperationResult.fail(ErrorKind.VALIDATION, "Invalid email or password.")
            self._storage.set_token(user.id)
        except Exception:
            logger.exception("Failed to log in email=%s", email)
            self._set_user(previous)
            return OperationResult.fail(ErrorKind.UNEXPECTED, "Failed to log in.")

        self._set_user(user)
        logger.info("User logged in id=%s role=%s", user.id, user.role.value)
        return OperationResult.ok("Login successful!")

    def login_form(self, form: LoginFormData) -> OperationResult:
        return self.login(form.email, form.password)

    def signup(self, name: str, email: str, password: str, confirm_password: str) -> OperationResult:
        try:
            if self.find_user_by_email(email) is not None:
                return OperationResult.fail(ErrorKind.VALIDATION, "Email is already in use.")

            if password != confirm_password:
                return OperationResult.fail(ErrorKind.VALIDATION, "Passwords do not match.")

            user = User(
                id=generate_id(),
                name=name,
                email=email,
                role=Role.EMPLOYEE,
                avatar=random_avatar(),
            )
            self._storage.put(USERS, user.to_record())
            self._storage.set_token(user.id)
        except Exception:
            logger.exception("Failed to create account email=%s", email)
            return OperationResult.fail(ErrorKind.UNEXPECTED, "Failed to create account.")

        self._set_user(user)
        logger.info("User signed up id=%s", user.id)
        return OperationResult.ok("Account created successfully!")

    def signup_form(self, form: SignupFormData) -> OperationResult:
        return self.signup(form.name, form.email, form.password, form.confirm_password)

    def logout(self) -> None:
        try:
            self._storage.remove_token()
        except Exception:
            logger.exception("Failed to remove session token")
        self._set_user(None)
