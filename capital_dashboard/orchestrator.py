"""
Main Orchestrator for Personal Capital Dashboard

Wires identity, storage and services together and exposes the
combined wealth view.

DESIGN DECISION: Storage is chosen per identity and injected.
- Signed-in user -> Google Sheets document store
- Anonymous visitor -> in-memory store seeded with demo data
- Signed-in user but Sheets not configured -> in-memory store,
  flagged so the UI can warn that nothing will be saved

No service reaches for global state; everything comes through here.
"""

from typing import Optional

from capital_dashboard.auth import Identity, IdentityProvider, SettingsIdentityProvider
from capital_dashboard.config import AppSettings, get_settings
from capital_dashboard.engine.demo import DemoConfig, generate_demo_cash_flow
from capital_dashboard.engine.wealth import combine, summarize_wealth
from capital_dashboard.log import configure_logging, get_logger
from capital_dashboard.models.investment import GlobalMonth, WealthAlignment, WealthSummary
from capital_dashboard.services import (
    CashFlowService,
    CategoryService,
    DocumentStoreInterface,
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
    InMemoryDocumentStore,
    InvestmentService,
)


logger = get_logger(__name__)


class DashboardSession:
    """
    Everything one visitor needs: their identity, their store and
    the services bound to them.
    """

    def __init__(
        self,
        identity: Identity,
        store: DocumentStoreInterface,
        app_settings: Optional[AppSettings] = None,
        storage_fallback: bool = False,
    ):
        self.identity = identity
        self.store = store
        self.settings = app_settings or AppSettings()
        self.storage_fallback = storage_fallback

        user_id = identity.storage_key
        self.categories = CategoryService(store, user_id)
        self.cash_flow = CashFlowService(store, user_id, categories=self.categories)
        self.investments = InvestmentService(store, user_id)

    @property
    def is_demo(self) -> bool:
        return self.identity.is_anonymous

    @property
    def locale(self) -> str:
        return self.settings.display_locale

    async def initialize(self) -> None:
        """
        Prepare the visitor's data.

        Anonymous visitors get a generated demo ledger (once per store);
        signed-in users get a profile if they don't have one yet. Both
        get the default categories when they have none.
        """
        if self.is_demo:
            existing = await self.store.list_months(self.identity.storage_key)
            if not existing:
                demo = generate_demo_cash_flow(
                    DemoConfig(
                        initial_capital=self.settings.demo_initial_capital,
                        base_net_salary=self.settings.demo_base_net_salary,
                        base_gross_salary=self.settings.demo_base_gross_salary,
                        months_to_generate=self.settings.demo_months,
                        start_year=self.settings.default_start_year,
                    ),
                    seed=self.settings.demo_seed,
                )
                await self.cash_flow.seed(demo)
        else:
            await self.cash_flow.ensure_profile(
                email=self.identity.email,
                display_name=self.identity.display_name,
            )

        await self.categories.list_categories()

    async def global_view(
        self,
        alignment: Optional[WealthAlignment] = None,
    ) -> tuple[list[GlobalMonth], WealthSummary]:
        """
        Combined liquid + invested timeline and its final summary.

        The projection starts in the year of the first ledger month
        (or the configured default year when the ledger is empty).
        """
        alignment = alignment or WealthAlignment(self.settings.wealth_alignment)

        ledger = await self.cash_flow.load()
        start_year = ledger.months[0].year if ledger.months else self.settings.default_start_year
        projection = await self.investments.projections(start_year, self.locale)

        rows = combine(ledger.months, projection, alignment=alignment, locale=self.locale)
        return rows, summarize_wealth(rows)


def create_app_components(
    identity_provider: Optional[IdentityProvider] = None,
    use_storage: bool = True,
) -> DashboardSession:
    """
    Factory function to create a dashboard session.

    Args:
        identity_provider: Source of the current identity
                          (defaults to the environment-based provider).
        use_storage: Whether to use Google Sheets for signed-in users.
                    Set to False for testing without storage.

    Returns:
        An uninitialized DashboardSession; await `initialize()` before use.
    """
    app_settings = get_settings().app
    configure_logging(app_settings.log_level)

    identity = (identity_provider or SettingsIdentityProvider()).current_identity()

    if identity.is_anonymous or not use_storage:
        logger.info("session_created", storage="memory", anonymous=identity.is_anonymous)
        return DashboardSession(
            identity,
            InMemoryDocumentStore(),
            app_settings,
            storage_fallback=not identity.is_anonymous,
        )

    try:
        store = GoogleSheetsDocumentStore(GoogleSheetsClient())
    except Exception as e:
        # Storage not configured - continue without it
        logger.warning("storage_not_configured", error=str(e))
        return DashboardSession(
            identity, InMemoryDocumentStore(), app_settings, storage_fallback=True
        )

    logger.info("session_created", storage="google_sheets", user_id=identity.user_id)
    return DashboardSession(identity, store, app_settings)
