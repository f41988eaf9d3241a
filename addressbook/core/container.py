from dataclasses import dataclass
from typing import Optional

from ..application.services.address_book_service import AddressBookService
from ..application.services.auth_service import AuthService
from .config import Settings
from ..domain.ports.cache import CacheBackend
from ..domain.ports.notifications import Notifier
from ..domain.ports.persistence import PersistenceGateway
from ..infrastructure.messaging.redis_queue import NotificationConsumer
from ..infrastructure.repositories.contact_repository import ContactRepository
from ..infrastructure.repositories.user_repository import UserRepository
from ..services.email_service import EmailService
from ..services.token_service import TokenService


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: PersistenceGateway
    cache: CacheBackend
    contact_repository: ContactRepository
    user_repository: UserRepository
    address_book_service: AddressBookService
    auth_service: AuthService
    token_service: TokenService
    email_service: EmailService
    notifier: Optional[Notifier] = None
    notification_consumer: Optional[NotificationConsumer] = None
