"""
Account Service

Registration and login against the account store.

GUARANTEES:
- A rejected registration changes nothing, in memory or on disk
- Usernames are unique; the first registration of a name wins
- Login never reveals whether the username or the password was wrong
"""

from typing import Optional

from ledger.audit import AuditLogger, create_correlation_id
from ledger.auth.credentials import CredentialVerifier, PlaintextVerifier
from ledger.exceptions import (
    DuplicateUsername,
    EmptyUsername,
    InvalidCredentials,
    InvalidText,
)
from ledger.models.entry import User
from ledger.services.storage import StorageWriteFailed, UserStorageInterface
from ledger.session import LedgerSession
from ledger.validation import validate_username


class AccountService:
    """
    Owns the in-memory user map for one run of the program.

    The map is loaded once, when the service is created, and written back
    after every registration and every session mutation.
    """

    def __init__(
        self,
        storage: UserStorageInterface,
        verifier: Optional[CredentialVerifier] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._verifier = verifier or PlaintextVerifier()
        self._audit_logger = audit_logger
        self._users = storage.load()

        if self._audit_logger:
            self._audit_logger.log_store_loaded(
                path=str(getattr(storage, "path", "")),
                record_count=len(self._users),
                issues=[str(issue) for issue in storage.diagnostics],
            )

    @property
    def users(self) -> dict[str, User]:
        """The live user map. Mutate only through this service or a session."""
        return self._users

    @property
    def load_diagnostics(self) -> list[str]:
        """Human-readable problems found when the store was loaded."""
        return [str(issue) for issue in self._storage.diagnostics]

    def register(self, username: str, password: str) -> User:
        """
        Create and persist a new user with empty lists and a zero budget.

        Raises:
            EmptyUsername: If the username is blank
            DuplicateUsername: If the username is taken
            InvalidText: If the password is not a string
            StorageWriteFailed: If the store could not be saved (the user
                is still registered in memory)
        """
        try:
            name = validate_username(username)
            if name in self._users:
                raise DuplicateUsername(name)
            if not isinstance(password, str):
                raise InvalidText("password", None, "must be text")
        except (EmptyUsername, DuplicateUsername, InvalidText) as e:
            if self._audit_logger:
                self._audit_logger.log_registration_rejected(
                    username=username if isinstance(username, str) else "",
                    reason=str(e),
                )
            raise

        user = User(username=name, password=self._verifier.encode(password))
        self._users[name] = user

        if self._audit_logger:
            self._audit_logger.log_user_registered(name)

        try:
            self._storage.save(self._users)
        except StorageWriteFailed as e:
            if self._audit_logger:
                self._audit_logger.log_save_failed(path=e.path, error_message=e.reason)
            raise

        if self._audit_logger:
            self._audit_logger.log_store_saved(str(getattr(self._storage, "path", "")))

        return user

    def authenticate(self, username: str, password: str) -> User:
        """
        Return the user matching the credentials.

        Raises:
            InvalidCredentials: Unknown username or wrong password
        """
        name = username.strip() if isinstance(username, str) else ""
        candidate = self._users.get(name)

        if candidate is None or not self._verifier.verify(candidate.password, password):
            if self._audit_logger:
                self._audit_logger.log_login_failed(name)
            raise InvalidCredentials()

        return candidate

    def login(self, username: str, password: str) -> LedgerSession:
        """
        Authenticate and open a session for the user.

        Raises:
            InvalidCredentials: Unknown username or wrong password
        """
        user = self.authenticate(username, password)
        correlation_id = create_correlation_id()

        if self._audit_logger:
            self._audit_logger.log_login_succeeded(user.username, correlation_id)

        return LedgerSession(
            user=user,
            users=self._users,
            storage=self._storage,
            audit_logger=self._audit_logger,
            correlation_id=correlation_id,
        )
