import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Union

from ...domain.exceptions import DuplicateRecordError, StoreError
from ...domain.models import Contact, User
from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the contact and user stores."""

    def __init__(self, path: Union[Path, str]) -> None:
        if str(path) != MEMORY_DATABASE:
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        with self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS contacts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    full_name TEXT NOT NULL,
                    address TEXT NOT NULL DEFAULT '',
                    city TEXT NOT NULL DEFAULT '',
                    state TEXT NOT NULL DEFAULT '',
                    zip_code TEXT NOT NULL DEFAULT '',
                    phone_number TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    role TEXT NOT NULL,
                    reset_token TEXT,
                    reset_token_expires_at TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )
        self._apply_migrations()

    def _apply_migrations(self) -> None:
        with self._lock:
            cur = self._conn.execute("PRAGMA table_info(users)")
            columns = {row[1] for row in cur.fetchall()}
        with self._lock, self._conn:
            for column in ("reset_token", "reset_token_expires_at"):
                if column not in columns:
                    self._conn.execute(f"ALTER TABLE users ADD COLUMN {column} TEXT")
            self._conn.execute(
                "CREATE UNIQUE INDEX IF NOT EXISTS idx_users_reset_token ON users(reset_token)"
            )

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.IntegrityError as exc:
            if "UNIQUE" in str(exc):
                raise DuplicateRecordError(f"{operation}: {exc}") from exc
            logger.error("SQLite constraint failure during %s: %s", operation, exc)
            raise StoreError(f"{operation}: {exc}") from exc
        except sqlite3.Error as exc:
            logger.error("SQLite failure during %s: %s", operation, exc)
            raise StoreError(f"{operation}: {exc}") from exc

    # ContactStore API -------------------------------------------------------
    def list_contacts(self) -> List[Contact]:
        with self._guard("list_contacts"), self._lock:
            cur = self._conn.execute("SELECT * FROM contacts ORDER BY id")
            rows = cur.fetchall()
        return [self._row_to_contact(row) for row in rows]

    def get_contact(self, contact_id: int) -> Optional[Contact]:
        with self._guard("get_contact"), self._lock:
            cur = self._conn.execute("SELECT * FROM contacts WHERE id = ?", (contact_id,))
            row = cur.fetchone()
        return self._row_to_contact(row) if row else None

    def insert_contact(self, contact: Contact) -> Contact:
        with self._guard("insert_contact"), self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO contacts (full_name, address, city, state, zip_code, phone_number)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    contact.full_name,
                    contact.address,
                    contact.city,
                    contact.state,
                    contact.zip_code,
                    contact.phone_number,
                ),
            )
            contact_id = cur.lastrowid
        return Contact(
            id=contact_id,
            full_name=contact.full_name,
            address=contact.address,
            city=contact.city,
            state=contact.state,
            zip_code=contact.zip_code,
            phone_number=contact.phone_number,
        )

    def update_contact(self, contact: Contact) -> None:
        with self._guard("update_contact"), self._lock, self._conn:
            self._conn.execute(
                """
                UPDATE contacts
                SET full_name = ?, address = ?, city = ?, state = ?,
                    zip_code = ?, phone_number = ?
                WHERE id = ?
                """,
                (
                    contact.full_name,
                    contact.address,
                    contact.city,
                    contact.state,
                    contact.zip_code,
                    contact.phone_number,
                    contact.id,
                ),
            )

    def delete_contact(self, contact_id: int) -> None:
        with self._guard("delete_contact"), self._lock, self._conn:
            self._conn.execute("DELETE FROM contacts WHERE id = ?", (contact_id,))

    # UserStore API ----------------------------------------------------------
    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._guard("get_user_by_email"), self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE email = ?", (email,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def get_user_by_reset_token(self, token: str) -> Optional[User]:
        with self._guard("get_user_by_reset_token"), self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE reset_token = ?", (token,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def insert_user(self, user: User) -> User:
        now = self._now()
        with self._guard("insert_user"), self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO users (
                    name, email, password_hash, role, reset_token,
                    reset_token_expires_at, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user.name,
                    user.email,
                    user.password_hash,
                    user.role,
                    user.reset_token,
                    self._format_datetime(user.reset_token_expires_at),
                    now,
                    now,
                ),
            )
            user_id = cur.lastrowid
        return User(
            id=user_id,
            name=user.name,
            email=user.email,
            password_hash=user.password_hash,
            role=user.role,
            reset_token=user.reset_token,
            reset_token_expires_at=user.reset_token_expires_at,
            created_at=self._parse_datetime(now),
            updated_at=self._parse_datetime(now),
        )

    def update_user(self, user: User) -> None:
        now = self._now()
        with self._guard("update_user"), self._lock, self._conn:
            self._conn.execute(
                """
                UPDATE users
                SET name = ?, email = ?, password_hash = ?, role = ?,
                    reset_token = ?, reset_token_expires_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    user.name,
                    user.email,
                    user.password_hash,
                    user.role,
                    user.reset_token,
                    self._format_datetime(user.reset_token_expires_at),
                    now,
                    user.id,
                ),
            )
        user.updated_at = self._parse_datetime(now)

    # Helpers ----------------------------------------------------------------
    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).replace(microsecond=0).isoformat()

    @staticmethod
    def _format_datetime(value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        try:
            result = datetime.fromisoformat(value)
        except ValueError:
            # Fallback for legacy formats without 'T'
            result = datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _row_to_contact(self, row: sqlite3.Row) -> Contact:
        return Contact(
            id=row["id"],
            full_name=row["full_name"],
            address=row["address"],
            city=row["city"],
            state=row["state"],
            zip_code=row["zip_code"],
            phone_number=row["phone_number"],
        )

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            role=row["role"],
            reset_token=row["reset_token"],
            reset_token_expires_at=self._parse_datetime(row["reset_token_expires_at"])
            if row["reset_token_expires_at"]
            else None,
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )
