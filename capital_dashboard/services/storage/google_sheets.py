"""
Google Sheets Document Store

DESIGN DECISION: Google Sheets is used as the remote store because:
1. Users can look at their own ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

Layout: one worksheet per collection (months, categories, profiles,
investment plans). Every row starts with the owning user_id; the
expenses of a month are stored as a JSON list in a single cell.

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No transactions and no real-time push from Sheets; subscribers are
  notified after writes made through this store and on `refresh()`
- Limited query capabilities (we filter in Python)
"""

import json
from datetime import datetime
from typing import Callable, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from capital_dashboard.config import GoogleSheetsSettings, get_settings
from capital_dashboard.log import get_logger
from capital_dashboard.models.investment import InvestmentPlan
from capital_dashboard.models.ledger import Category, Expense, MonthEntry, UserProfile
from capital_dashboard.services.storage.interface import (
    ConnectionError,
    DocumentStoreInterface,
    DuplicateError,
    NotFoundError,
    StorageError,
)


MONTH_COLUMNS = [
    "user_id",
    "id",
    "month",
    "year",
    "net_salary",
    "gross_salary",
    "expenses_json",
    "cumulative_capital",
]

CATEGORY_COLUMNS = [
    "user_id",
    "id",
    "name",
    "color",
    "is_default",
]

PROFILE_COLUMNS = [
    "user_id",
    "email",
    "display_name",
    "initial_capital",
    "created_at",
    "updated_at",
]

INVESTMENT_COLUMNS = [
    "user_id",
    "initial_balance",
    "monthly_investment",
    "annual_roi",
    "years_to_simulate",
]

# Missing records and duplicate IDs are answers, not transient failures
write_retry = retry(
    retry=retry_if_not_exception_type((NotFoundError, DuplicateError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)

logger = get_logger(__name__)


def _safe_get(row: list, index: int, default: str = "") -> str:
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, title: str, columns: list[str]) -> gspread.Worksheet:
        """Get a worksheet, creating it with a header row if missing."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_months_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.months_sheet_name, MONTH_COLUMNS)

    def get_categories_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.categories_sheet_name, CATEGORY_COLUMNS)

    def get_profiles_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.profiles_sheet_name, PROFILE_COLUMNS)

    def get_investment_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.investment_sheet_name, INVESTMENT_COLUMNS)


# =============================================================================
# ROW CONVERSION
# =============================================================================

def month_to_row(user_id: str, entry: MonthEntry) -> list:
    """Convert a MonthEntry to a spreadsheet row."""
    return [
        user_id,
        entry.id,
        str(entry.month),
        str(entry.year),
        str(entry.net_salary),
        str(entry.gross_salary),
        json.dumps([expense.model_dump() for expense in entry.expenses]),
        str(entry.cumulative_capital),
    ]


def row_to_month(row: list) -> MonthEntry:
    """Convert a spreadsheet row to a MonthEntry."""
    expenses_json = _safe_get(row, 6)
    expenses = [Expense(**item) for item in json.loads(expenses_json)] if expenses_json else []
    return MonthEntry(
        id=_safe_get(row, 1),
        month=int(_safe_get(row, 2, "0")),
        year=int(_safe_get(row, 3, "1")),
        net_salary=float(_safe_get(row, 4, "0")),
        gross_salary=float(_safe_get(row, 5, "0")),
        expenses=expenses,
        cumulative_capital=float(_safe_get(row, 7, "0")),
    )


def category_to_row(user_id: str, category: Category) -> list:
    return [
        user_id,
        category.id,
        category.name,
        category.color,
        str(category.is_default),
    ]


def row_to_category(row: list) -> Category:
    return Category(
        id=_safe_get(row, 1),
        name=_safe_get(row, 2),
        color=_safe_get(row, 3),
        is_default=_safe_get(row, 4).lower() == "true",
    )


def profile_to_row(user_id: str, profile: UserProfile) -> list:
    return [
        user_id,
        profile.email,
        profile.display_name or "",
        str(profile.initial_capital),
        profile.created_at.isoformat(),
        profile.updated_at.isoformat(),
    ]


def row_to_profile(row: list) -> UserProfile:
    return UserProfile(
        email=_safe_get(row, 1),
        display_name=_safe_get(row, 2) or None,
        initial_capital=float(_safe_get(row, 3, "0")),
        created_at=datetime.fromisoformat(_safe_get(row, 4)),
        updated_at=datetime.fromisoformat(_safe_get(row, 5)),
    )


def plan_to_row(user_id: str, plan: InvestmentPlan) -> list:
    return [
        user_id,
        str(plan.initial_balance),
        str(plan.monthly_investment),
        str(plan.annual_roi),
        str(plan.years_to_simulate),
    ]


def row_to_plan(row: list) -> InvestmentPlan:
    return InvestmentPlan(
        initial_balance=float(_safe_get(row, 1, "0")),
        monthly_investment=float(_safe_get(row, 2, "0")),
        annual_roi=float(_safe_get(row, 3, "0")),
        years_to_simulate=int(_safe_get(row, 4, "0")),
    )


# =============================================================================
# STORE
# =============================================================================

class GoogleSheetsDocumentStore(DocumentStoreInterface):
    """
    Google Sheets implementation of the document store.

    Records are stored one per row; rows belonging to other users
    are skipped on every read.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        super().__init__()
        self._client = client or GoogleSheetsClient()

    # -------------------------------------------------------------------------
    # Row helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _user_rows(sheet: gspread.Worksheet, user_id: str) -> list[tuple[int, list]]:
        """(1-based sheet row number, row) for every row owned by the user."""
        all_rows = sheet.get_all_values()
        return [
            (idx, row)
            for idx, row in enumerate(all_rows[1:], start=2)  # Row 1 is header
            if row and row[0] == user_id
        ]

    @classmethod
    def _find_row(cls, sheet: gspread.Worksheet, user_id: str, record_id: str) -> Optional[int]:
        for idx, row in cls._user_rows(sheet, user_id):
            if len(row) > 1 and row[1] == record_id:
                return idx
        return None

    @classmethod
    def _parse_rows(
        cls,
        sheet: gspread.Worksheet,
        user_id: str,
        parse: Callable[[list], object],
    ) -> list:
        records = []
        for idx, row in cls._user_rows(sheet, user_id):
            try:
                records.append(parse(row))
            except (ValueError, TypeError) as e:
                logger.warning("sheet_row_skipped", sheet=sheet.title, row=idx, error=str(e))
        return records

    @staticmethod
    def _replace_row(sheet: gspread.Worksheet, idx: int, row: list) -> None:
        sheet.update(range_name=f"A{idx}", values=[row], value_input_option="RAW")

    # -------------------------------------------------------------------------
    # Months
    # -------------------------------------------------------------------------

    async def list_months(self, user_id: str) -> list[MonthEntry]:
        try:
            sheet = self._client.get_months_sheet()
            return self._parse_rows(sheet, user_id, row_to_month)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list months: {e}")

    @write_retry
    async def add_month(self, user_id: str, entry: MonthEntry) -> bool:
        try:
            sheet = self._client.get_months_sheet()
            if self._find_row(sheet, user_id, entry.id) is not None:
                raise DuplicateError(f"Month already exists: {entry.id}")
            sheet.append_row(month_to_row(user_id, entry), value_input_option="RAW")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to add month: {e}")
        await self._publish_months(user_id)
        return True

    @write_retry
    async def update_month(self, user_id: str, entry: MonthEntry) -> bool:
        try:
            sheet = self._client.get_months_sheet()
            idx = self._find_row(sheet, user_id, entry.id)
            if idx is None:
                raise NotFoundError(f"Month not found: {entry.id}")
            self._replace_row(sheet, idx, month_to_row(user_id, entry))
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update month: {e}")
        await self._publish_months(user_id)
        return True

    @write_retry
    async def delete_month(self, user_id: str, month_id: str) -> bool:
        try:
            sheet = self._client.get_months_sheet()
            idx = self._find_row(sheet, user_id, month_id)
            if idx is None:
                return False
            sheet.delete_rows(idx)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete month: {e}")
        await self._publish_months(user_id)
        return True

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    async def list_categories(self, user_id: str) -> list[Category]:
        try:
            sheet = self._client.get_categories_sheet()
            return self._parse_rows(sheet, user_id, row_to_category)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list categories: {e}")

    @write_retry
    async def add_category(self, user_id: str, category: Category) -> bool:
        try:
            sheet = self._client.get_categories_sheet()
            if self._find_row(sheet, user_id, category.id) is not None:
                raise DuplicateError(f"Category already exists: {category.id}")
            sheet.append_row(category_to_row(user_id, category), value_input_option="RAW")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to add category: {e}")
        await self._publish_categories(user_id)
        return True

    @write_retry
    async def update_category(self, user_id: str, category: Category) -> bool:
        try:
            sheet = self._client.get_categories_sheet()
            idx = self._find_row(sheet, user_id, category.id)
            if idx is None:
                raise NotFoundError(f"Category not found: {category.id}")
            self._replace_row(sheet, idx, category_to_row(user_id, category))
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update category: {e}")
        await self._publish_categories(user_id)
        return True

    @write_retry
    async def delete_category(self, user_id: str, category_id: str) -> bool:
        try:
            sheet = self._client.get_categories_sheet()
            idx = self._find_row(sheet, user_id, category_id)
            if idx is None:
                return False
            sheet.delete_rows(idx)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete category: {e}")
        await self._publish_categories(user_id)
        return True

    @write_retry
    async def replace_categories(self, user_id: str, categories: list[Category]) -> bool:
        try:
            sheet = self._client.get_categories_sheet()
            # Delete bottom-up so earlier row numbers stay valid
            for idx, _ in reversed(self._user_rows(sheet, user_id)):
                sheet.delete_rows(idx)
            if categories:
                sheet.append_rows(
                    [category_to_row(user_id, c) for c in categories],
                    value_input_option="RAW",
                )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to replace categories: {e}")
        await self._publish_categories(user_id)
        return True

    # -------------------------------------------------------------------------
    # Profile and investment plan
    # -------------------------------------------------------------------------

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        try:
            sheet = self._client.get_profiles_sheet()
            rows = self._user_rows(sheet, user_id)
            return row_to_profile(rows[0][1]) if rows else None
        except Exception as e:
            raise StorageError(f"Failed to get profile: {e}")

    @write_retry
    async def save_profile(self, user_id: str, profile: UserProfile) -> bool:
        try:
            sheet = self._client.get_profiles_sheet()
            rows = self._user_rows(sheet, user_id)
            row = profile_to_row(user_id, profile)
            if rows:
                self._replace_row(sheet, rows[0][0], row)
            else:
                sheet.append_row(row, value_input_option="RAW")
            return True
        except Exception as e:
            raise StorageError(f"Failed to save profile: {e}")

    async def get_investment_plan(self, user_id: str) -> Optional[InvestmentPlan]:
        try:
            sheet = self._client.get_investment_sheet()
            rows = self._user_rows(sheet, user_id)
            return row_to_plan(rows[0][1]) if rows else None
        except Exception as e:
            raise StorageError(f"Failed to get investment plan: {e}")

    @write_retry
    async def save_investment_plan(self, user_id: str, plan: InvestmentPlan) -> bool:
        try:
            sheet = self._client.get_investment_sheet()
            rows = self._user_rows(sheet, user_id)
            row = plan_to_row(user_id, plan)
            if rows:
                self._replace_row(sheet, rows[0][0], row)
            else:
                sheet.append_row(row, value_input_option="RAW")
            return True
        except Exception as e:
            raise StorageError(f"Failed to save investment plan: {e}")

    async def refresh(self, user_id: str) -> None:
        """Re-read the user's collections and notify subscribers (edits made in Sheets directly)."""
        await self._publish_months(user_id)
        await self._publish_categories(user_id)
