"""
Abstract Document Store Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Use a remote store (Google Sheets) for signed-in users
2. Use an in-memory store for anonymous visitors and tests
3. Keep services decoupled from the storage implementation

Every operation is keyed by an opaque user identifier; records inside a
user's collections are keyed by their own IDs. There is no query or
migration logic here, only the operations the dashboard needs.

DESIGN DECISION: Change notifications are explicit.
Callers register a callback with `subscribe_months` / `subscribe_categories`
and get back a Subscription they must `unsubscribe()` when done.
The callback receives the full, current collection after every write.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from capital_dashboard.models.investment import InvestmentPlan
from capital_dashboard.models.ledger import Category, MonthEntry, UserProfile


MonthsCallback = Callable[[list[MonthEntry]], None]
CategoriesCallback = Callable[[list[Category]], None]

MONTHS_TOPIC = "months"
CATEGORIES_TOPIC = "categories"


class Subscription:
    """Handle returned by a subscribe call."""

    def __init__(self, registry: "SubscriptionRegistry", topic: str, user_id: str, callback: Callable):
        self._registry = registry
        self.topic = topic
        self.user_id = user_id
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        """Stop receiving notifications. Calling it twice is harmless."""
        if self.active:
            self._registry.remove(self)
            self.active = False


class SubscriptionRegistry:
    """Callbacks per (topic, user_id)."""

    def __init__(self):
        self._subscriptions: dict[tuple[str, str], list[Subscription]] = {}

    def add(self, topic: str, user_id: str, callback: Callable) -> Subscription:
        subscription = Subscription(self, topic, user_id, callback)
        self._subscriptions.setdefault((topic, user_id), []).append(subscription)
        return subscription

    def remove(self, subscription: Subscription) -> None:
        key = (subscription.topic, subscription.user_id)
        remaining = [s for s in self._subscriptions.get(key, []) if s is not subscription]
        if remaining:
            self._subscriptions[key] = remaining
        else:
            self._subscriptions.pop(key, None)

    def has_subscribers(self, topic: str, user_id: str) -> bool:
        return bool(self._subscriptions.get((topic, user_id)))

    def notify(self, topic: str, user_id: str, payload: list) -> None:
        # Copy: a callback may unsubscribe while we iterate
        for subscription in list(self._subscriptions.get((topic, user_id), [])):
            subscription.callback(list(payload))


class DocumentStoreInterface(ABC):
    """
    Abstract interface for per-user document storage.

    Any storage implementation (Google Sheets, in-memory, ...)
    must implement the abstract methods. Subscription bookkeeping
    is shared and implemented here.
    """

    def __init__(self):
        self._registry = SubscriptionRegistry()

    # -------------------------------------------------------------------------
    # Months
    # -------------------------------------------------------------------------

    @abstractmethod
    async def list_months(self, user_id: str) -> list[MonthEntry]:
        """
        List all month entries of a user, in storage order (unsorted).

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def add_month(self, user_id: str, entry: MonthEntry) -> bool:
        """
        Store a new month entry.

        Raises:
            DuplicateError: If a month with the same ID exists
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def update_month(self, user_id: str, entry: MonthEntry) -> bool:
        """
        Replace an existing month entry (matched by ID).

        Raises:
            NotFoundError: If the month doesn't exist
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_month(self, user_id: str, month_id: str) -> bool:
        """
        Delete a month entry.

        Returns:
            True if deleted, False if it did not exist
        """
        pass

    async def get_month(self, user_id: str, month_id: str) -> Optional[MonthEntry]:
        """Retrieve one month entry by ID, None if missing."""
        for entry in await self.list_months(user_id):
            if entry.id == month_id:
                return entry
        return None

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    @abstractmethod
    async def list_categories(self, user_id: str) -> list[Category]:
        """List a user's categories in insertion order."""
        pass

    @abstractmethod
    async def add_category(self, user_id: str, category: Category) -> bool:
        """
        Store a new category.

        Raises:
            DuplicateError: If a category with the same ID exists
        """
        pass

    @abstractmethod
    async def update_category(self, user_id: str, category: Category) -> bool:
        """
        Replace an existing category (matched by ID).

        Raises:
            NotFoundError: If the category doesn't exist
        """
        pass

    @abstractmethod
    async def delete_category(self, user_id: str, category_id: str) -> bool:
        """Delete a category; False if it did not exist."""
        pass

    @abstractmethod
    async def replace_categories(self, user_id: str, categories: list[Category]) -> bool:
        """Delete all of a user's categories and store the given ones."""
        pass

    # -------------------------------------------------------------------------
    # Profile and investment plan (one document each per user)
    # -------------------------------------------------------------------------

    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        pass

    @abstractmethod
    async def save_profile(self, user_id: str, profile: UserProfile) -> bool:
        pass

    @abstractmethod
    async def get_investment_plan(self, user_id: str) -> Optional[InvestmentPlan]:
        pass

    @abstractmethod
    async def save_investment_plan(self, user_id: str, plan: InvestmentPlan) -> bool:
        pass

    # -------------------------------------------------------------------------
    # Change notifications
    # -------------------------------------------------------------------------

    async def subscribe_months(self, user_id: str, callback: MonthsCallback) -> Subscription:
        """
        Register for month changes.

        The callback is invoked immediately with the current months and
        again after every write to this user's months.
        """
        subscription = self._registry.add(MONTHS_TOPIC, user_id, callback)
        callback(await self.list_months(user_id))
        return subscription

    async def subscribe_categories(
        self,
        user_id: str,
        callback: CategoriesCallback,
    ) -> Subscription:
        """Register for category changes (invoked immediately, then after every write)."""
        subscription = self._registry.add(CATEGORIES_TOPIC, user_id, callback)
        callback(await self.list_categories(user_id))
        return subscription

    async def _publish_months(self, user_id: str) -> None:
        if self._registry.has_subscribers(MONTHS_TOPIC, user_id):
            self._registry.notify(MONTHS_TOPIC, user_id, await self.list_months(user_id))

    async def _publish_categories(self, user_id: str) -> None:
        if self._registry.has_subscribers(CATEGORIES_TOPIC, user_id):
            self._registry.notify(CATEGORIES_TOPIC, user_id, await self.list_categories(user_id))


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
