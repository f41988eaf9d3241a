"""Shared fixtures for the address book test suite."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from addressbook.application.services.address_book_service import AddressBookService
from addressbook.application.services.auth_service import AuthService
from addressbook.core.app_factory import create_application
from addressbook.core.config import Settings
from addressbook.core.container import ApplicationContainer
from addressbook.infrastructure.cache.memory_cache import InMemoryCache
from addressbook.infrastructure.persistence.sqlite import SQLitePersistence
from addressbook.infrastructure.repositories.contact_repository import ContactRepository
from addressbook.infrastructure.repositories.user_repository import UserRepository
from addressbook.services.email_service import EmailService
from addressbook.services.token_service import TokenService


class RecordingCache(InMemoryCache):
    """In-memory cache that records every call for assertions."""

    def __init__(self) -> None:
        super().__init__()
        self.sets: List[str] = []
        self.deletes: List[str] = []
        self.gets: List[str] = []

    def get(self, key: str) -> Optional[str]:
        self.gets.append(key)
        return super().get(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.sets.append(key)
        super().set(key, value, ttl_seconds)

    def delete(self, key: str) -> None:
        self.deletes.append(key)
        super().delete(key)


class FakeNotifier:
    def __init__(self) -> None:
        self.published: List[Tuple[str, Dict[str, Any]]] = []

    def publish(self, event: str, payload: Dict[str, Any]) -> None:
        self.published.append((event, payload))


class FakeEmailService(EmailService):
    def __init__(self, succeed: bool = True) -> None:
        super().__init__(smtp_host="", smtp_username="", from_email="")
        self.enabled = False
        self.succeed = succeed
        self.sent: List[Dict[str, Any]] = []

    def send_password_reset_email(self, to_email, reset_token, base_url, expires_in_minutes=60) -> bool:
        self.sent.append(
            {
                "to_email": to_email,
                "reset_token": reset_token,
                "base_url": base_url,
                "expires_in_minutes": expires_in_minutes,
            }
        )
        return self.succeed


class FrozenClock:
    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def persistence(tmp_path):
    store = SQLitePersistence(tmp_path / "addressbook.db")
    yield store
    store.close()


@pytest.fixture
def cache() -> RecordingCache:
    return RecordingCache()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def email_service() -> FakeEmailService:
    return FakeEmailService()


@pytest.fixture
def contact_repository(persistence, cache) -> ContactRepository:
    return ContactRepository(persistence, cache, cache_ttl=timedelta(minutes=10))


@pytest.fixture
def user_repository(persistence, clock) -> UserRepository:
    return UserRepository(persistence, reset_token_ttl=timedelta(hours=1), clock=clock)


@pytest.fixture
def auth_service(user_repository, email_service, notifier) -> AuthService:
    return AuthService(
        user_repository,
        email_service,
        frontend_base_url="http://frontend.test",
        notifier=notifier,
    )


@pytest.fixture
def address_book_service(contact_repository, notifier) -> AddressBookService:
    return AddressBookService(contact_repository, notifier)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(jwt_secret="test-secret", issuer="test-issuer", audience="test-audience")


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    monkeypatch.setenv("NOTIFICATION_CONSUMER_ENABLED", "false")
    return Settings()


@pytest.fixture
def container(
    settings,
    persistence,
    cache,
    contact_repository,
    user_repository,
    address_book_service,
    auth_service,
    token_service,
    email_service,
    notifier,
) -> ApplicationContainer:
    return ApplicationContainer(
        settings=settings,
        persistence=persistence,
        cache=cache,
        contact_repository=contact_repository,
        user_repository=user_repository,
        address_book_service=address_book_service,
        auth_service=auth_service,
        token_service=token_service,
        email_service=email_service,
        notifier=notifier,
    )


@pytest.fixture
def client(container):
    app = create_application(container=container)
    with TestClient(app) as test_client:
        yield test_client
