"""
Category Service

Manages a user's expense categories on top of an injected document store.

DESIGN DECISION: No global category store.
The service is created per user with either the remote store or the
in-memory fallback; callers never reach for process-wide state.

Name checks return False instead of raising, so the UI can show
a simple "name already used" message:
- names are trimmed, must not be blank and fit in 100 characters
- names are unique per user, ignoring case
- default categories cannot be removed
Storage failures are logged and raised.
"""

from typing import Optional

from capital_dashboard.log import get_logger
from capital_dashboard.models.ledger import Category, default_categories
from capital_dashboard.services.storage import (
    DocumentStoreInterface,
    StorageError,
    Subscription,
)
from capital_dashboard.services.storage.interface import CategoriesCallback
from capital_dashboard.utils.formatting import CATEGORY_COLORS
from capital_dashboard.validation import EntryValidator


class CategoryService:
    """Per-user category operations."""

    def __init__(self, store: DocumentStoreInterface, user_id: str):
        self._store = store
        self._user_id = user_id
        self._logger = get_logger(__name__).bind(user_id=user_id)
        self._validator = EntryValidator()

    async def list_categories(self) -> list[Category]:
        """
        Get the user's categories.

        A user with no categories at all is initialized with the defaults.
        """
        categories = await self._store.list_categories(self._user_id)
        if categories:
            return categories

        defaults = default_categories()
        try:
            await self._store.replace_categories(self._user_id, defaults)
        except StorageError as e:
            self._logger.error("default_categories_failed", error=str(e))
            raise
        self._logger.info("default_categories_created", count=len(defaults))
        return defaults

    async def get_by_name(self, name: str) -> Optional[Category]:
        """Case-insensitive lookup by name."""
        wanted = name.strip().lower()
        for category in await self.list_categories():
            if category.name.lower() == wanted:
                return category
        return None

    async def add_category(self, name: str) -> bool:
        """Add a category; False if the name is invalid or already used."""
        trimmed = name.strip()
        if not self._validator.validate_category_name(trimmed).is_valid:
            return False

        categories = await self.list_categories()
        if any(c.name.lower() == trimmed.lower() for c in categories):
            return False

        category = Category(
            name=trimmed,
            color=CATEGORY_COLORS[len(categories) % len(CATEGORY_COLORS)],
            is_default=False,
        )
        try:
            await self._store.add_category(self._user_id, category)
        except StorageError as e:
            self._logger.error("category_add_failed", name=trimmed, error=str(e))
            raise
        self._logger.info("category_added", category_id=category.id, name=trimmed)
        return True

    async def rename_category(self, category_id: str, name: str) -> bool:
        """
        Rename a category; False if invalid, already used by another category,
        or unknown.

        Expenses recorded earlier keep the old name.
        """
        trimmed = name.strip()
        if not self._validator.validate_category_name(trimmed).is_valid:
            return False

        categories = await self.list_categories()
        if any(c.id != category_id and c.name.lower() == trimmed.lower() for c in categories):
            return False

        current = next((c for c in categories if c.id == category_id), None)
        if current is None:
            return False

        try:
            await self._store.update_category(
                self._user_id, current.model_copy(update={"name": trimmed})
            )
        except StorageError as e:
            self._logger.error("category_rename_failed", category_id=category_id, error=str(e))
            raise
        self._logger.info("category_renamed", category_id=category_id, name=trimmed)
        return True

    async def update_color(self, category_id: str, color: str) -> bool:
        """Change a category's color; False if the category is unknown."""
        categories = await self.list_categories()
        current = next((c for c in categories if c.id == category_id), None)
        if current is None:
            return False

        try:
            await self._store.update_category(
                self._user_id, current.model_copy(update={"color": color})
            )
        except StorageError as e:
            self._logger.error("category_color_failed", category_id=category_id, error=str(e))
            raise
        return True

    async def remove_category(self, category_id: str) -> bool:
        """Remove a custom category; False for default or unknown categories."""
        categories = await self.list_categories()
        current = next((c for c in categories if c.id == category_id), None)
        if current is None or current.is_default:
            return False

        try:
            removed = await self._store.delete_category(self._user_id, category_id)
        except StorageError as e:
            self._logger.error("category_remove_failed", category_id=category_id, error=str(e))
            raise
        if removed:
            self._logger.info("category_removed", category_id=category_id)
        return removed

    async def subscribe(self, callback: CategoriesCallback) -> Subscription:
        """Get notified with the full category list after every change."""
        return await self._store.subscribe_categories(self._user_id, callback)
