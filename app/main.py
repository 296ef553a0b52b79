"""
Streamlit Frontend for Personal Capital Dashboard

The screens a user sees every month: record salaries and expenses,
tune the investment plan, and look at where their wealth is going.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every number shown is recomputed from the stored months
3. Clear error messages in simple language
4. Visual feedback for all operations

Anonymous visitors get a generated demo ledger that lives only
in memory; a banner says so on every page.
"""

import asyncio
from datetime import date

import streamlit as st

from capital_dashboard.config import validate_all_settings
from capital_dashboard.engine.investment import summarize_projection
from capital_dashboard.engine.ledger import expenses_by_category, monthly_balance, total_expenses
from capital_dashboard.models.investment import InvestmentPlan, WealthAlignment
from capital_dashboard.orchestrator import DashboardSession, create_app_components
from capital_dashboard.services import DashboardError, InvalidInputError, StorageError
from capital_dashboard.utils.formatting import MONTH_LABELS, format_currency, format_percentage
from capital_dashboard.validation import EntryValidator


# Page configuration
st.set_page_config(
    page_title="Capital Dashboard",
    page_icon="💶",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .demo-box {
        padding: 16px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_session() -> DashboardSession:
    """Get or create the dashboard session (cached)."""
    try:
        session = create_app_components(use_storage=True)
        run_async(session.initialize())
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        session = create_app_components(use_storage=False)
        run_async(session.initialize())
    return session


def show_error(error: Exception) -> None:
    """One place to turn service errors into messages."""
    if isinstance(error, InvalidInputError) and error.result.has_errors:
        summary = EntryValidator().get_user_friendly_summary(error.result)
        st.error(summary.replace("\n", "  \n"))
    elif isinstance(error, StorageError):
        st.error(f"❌ Could not save your changes: {error}")
    else:
        st.error(f"❌ {error}")


def main():
    """Main application entry point."""
    session = get_session()

    # Sidebar navigation
    st.sidebar.title("💶 Capital Dashboard")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Dashboard", "📒 Cash Flow", "📈 Investments", "🌍 Global", "🏷️ Categories", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Set your starting capital
        2. Add a month and its expenses
        3. Tune your investment plan
        4. Check the global view
        """
    )

    if session.is_demo:
        st.markdown(
            '<div class="demo-box">👋 You are viewing <b>demo data</b>. '
            "Changes are kept in memory only and are lost on restart.</div>",
            unsafe_allow_html=True,
        )
    elif session.storage_fallback:
        st.warning("⚠️ Storage is not configured. Changes will not be saved.")

    if page == "🏠 Dashboard":
        render_dashboard_page(session)
    elif page == "📒 Cash Flow":
        render_cash_flow_page(session)
    elif page == "📈 Investments":
        render_investments_page(session)
    elif page == "🌍 Global":
        render_global_page(session)
    elif page == "🏷️ Categories":
        render_categories_page(session)
    elif page == "⚙️ Settings":
        render_settings_page(session)


def render_dashboard_page(session: DashboardSession):
    """Greeting plus the three headline numbers."""
    st.title(f"Ciao, {session.identity.first_name}! 👋")

    data = run_async(session.cash_flow.load())
    rows, wealth = run_async(session.global_view())

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Liquid capital", format_currency(data.final_capital))
    with col2:
        st.metric("Invested capital", format_currency(wealth.invested_capital))
    with col3:
        st.metric("Total wealth", format_currency(wealth.total_wealth))

    if not data.months:
        st.info("📋 Your ledger is empty. Use the 'Cash Flow' page to add your first month.")
        return

    st.markdown("### Capital over time")
    st.line_chart(
        {"Capital": [m.cumulative_capital for m in data.months]},
    )


def render_cash_flow_page(session: DashboardSession):
    """Render the ledger page: initial capital, months and expenses."""
    st.title("📒 Cash Flow")
    locale = session.locale

    data = run_async(session.cash_flow.load())

    with st.form("initial_capital_form"):
        raw_capital = st.text_input(
            "Initial capital (€)",
            value=str(data.initial_capital),
            help="Money you had before the first month. May be negative.",
        )
        if st.form_submit_button("💾 Save initial capital"):
            try:
                data = run_async(session.cash_flow.set_initial_capital(raw_capital))
                st.success("✅ Initial capital saved")
            except (DashboardError, StorageError) as e:
                show_error(e)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("➕ Add next month"):
            try:
                entry = run_async(session.cash_flow.append_next_month())
                st.success(f"✅ Added {entry.label(locale)}")
                st.rerun()
            except (DashboardError, StorageError) as e:
                show_error(e)
    with col2:
        if st.button("🗑️ Remove last month"):
            if run_async(session.cash_flow.remove_last_month()):
                st.rerun()
            else:
                st.warning("⚠️ The ledger must keep at least one month")

    if not data.months:
        with st.form("first_month_form"):
            today = date.today()
            month = st.selectbox(
                "Month",
                options=list(range(12)),
                index=today.month - 1,
                format_func=lambda i: MONTH_LABELS[locale][i],
            )
            year = st.number_input("Year", min_value=1900, max_value=2200, value=today.year)
            if st.form_submit_button("➕ Add month"):
                try:
                    run_async(session.cash_flow.add_month(month, int(year)))
                    st.rerun()
                except (DashboardError, StorageError) as e:
                    show_error(e)
        return

    st.markdown("---")

    categories = run_async(session.categories.list_categories())
    category_names = [c.name for c in categories]

    for entry in reversed(data.months):
        title = (
            f"{entry.label(locale)} · "
            f"balance {format_currency(monthly_balance(entry))} · "
            f"capital {format_currency(entry.cumulative_capital)}"
        )
        with st.expander(title, expanded=entry is data.months[-1]):
            col1, col2 = st.columns(2)
            with col1:
                net = st.text_input("Net salary (€)", value=str(entry.net_salary), key=f"net_{entry.id}")
            with col2:
                gross = st.text_input("Gross salary (€)", value=str(entry.gross_salary), key=f"gross_{entry.id}")
            if st.button("💾 Save salary", key=f"salary_{entry.id}"):
                try:
                    run_async(session.cash_flow.update_salary(entry.id, net, gross))
                    st.rerun()
                except (DashboardError, StorageError) as e:
                    show_error(e)

            st.markdown(f"**Expenses:** {format_currency(total_expenses(entry), decimals=2)}")
            for expense in entry.expenses:
                c1, c2, c3 = st.columns([3, 2, 1])
                with c1:
                    st.markdown(
                        f"<span style='color:{expense.color}'>●</span> {expense.category}",
                        unsafe_allow_html=True,
                    )
                with c2:
                    st.markdown(format_currency(expense.amount, decimals=2))
                with c3:
                    if st.button("✖", key=f"rm_{expense.id}"):
                        run_async(session.cash_flow.remove_expense(entry.id, expense.id))
                        st.rerun()

            with st.form(f"expense_form_{entry.id}", clear_on_submit=True):
                c1, c2 = st.columns(2)
                with c1:
                    category = st.selectbox("Category", category_names, key=f"cat_{entry.id}")
                with c2:
                    amount = st.text_input("Amount (€)", key=f"amount_{entry.id}")
                if st.form_submit_button("➕ Add expense"):
                    try:
                        run_async(session.cash_flow.add_expense(entry.id, category, amount))
                        st.rerun()
                    except (DashboardError, StorageError) as e:
                        show_error(e)

            by_category = expenses_by_category(entry)
            if by_category:
                st.bar_chart(
                    {"Category": list(by_category), "Amount": list(by_category.values())},
                    x="Category",
                    y="Amount",
                )


def render_investments_page(session: DashboardSession):
    """Render the investment plan editor and its projection."""
    st.title("📈 Investments")

    plan = run_async(session.investments.get_plan())

    with st.form("plan_form"):
        col1, col2 = st.columns(2)
        with col1:
            initial_balance = st.number_input(
                "Initial balance (€)", min_value=0.0, value=float(plan.initial_balance), step=100.0
            )
            monthly_investment = st.number_input(
                "Monthly investment (€)", min_value=0.0, value=float(plan.monthly_investment), step=50.0
            )
        with col2:
            annual_roi = st.number_input(
                "Annual return (%)", value=float(plan.annual_roi), step=0.5
            )
            years = st.number_input(
                "Years to simulate", min_value=1, max_value=100, value=int(plan.years_to_simulate)
            )

        if st.form_submit_button("💾 Save plan"):
            try:
                plan = run_async(session.investments.update_plan(InvestmentPlan(
                    initial_balance=initial_balance,
                    monthly_investment=monthly_investment,
                    annual_roi=annual_roi,
                    years_to_simulate=int(years),
                )))
                st.success("✅ Plan saved")
            except (DashboardError, StorageError) as e:
                show_error(e)

    data = run_async(session.cash_flow.load())
    start_year = data.months[0].year if data.months else session.settings.default_start_year
    projection = run_async(session.investments.projections(start_year, session.locale))
    summary = summarize_projection(projection)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total invested", format_currency(summary.total_invested))
    with col2:
        st.metric("Portfolio value", format_currency(summary.portfolio_value))
    with col3:
        st.metric("Returns", format_currency(summary.returns))
    with col4:
        st.metric("Return", format_percentage(summary.return_percentage))

    st.markdown("### Projection")
    st.area_chart({
        "Invested": [p.total_invested for p in projection],
        "Portfolio": [p.portfolio_value for p in projection],
    })


def render_global_page(session: DashboardSession):
    """Render the combined liquid + invested view."""
    st.title("🌍 Global")

    options = [WealthAlignment.POSITIONAL, WealthAlignment.CALENDAR]
    alignment = st.radio(
        "Pair ledger and projection by",
        options,
        index=options.index(WealthAlignment(session.settings.wealth_alignment)),
        format_func=lambda a: "Row order" if a == WealthAlignment.POSITIONAL else "Calendar month",
        horizontal=True,
    )

    rows, wealth = run_async(session.global_view(alignment))
    if not rows:
        st.info("📋 Nothing to show yet.")
        return

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric(
            "Liquid", format_currency(wealth.liquid_capital),
            delta=format_percentage(wealth.liquid_percentage), delta_color="off",
        )
    with col2:
        st.metric(
            "Invested", format_currency(wealth.invested_capital),
            delta=format_percentage(wealth.invested_percentage), delta_color="off",
        )
    with col3:
        st.metric("Total wealth", format_currency(wealth.total_wealth))

    st.area_chart({
        "Liquid": [r.liquid_capital for r in rows],
        "Invested": [r.invested_capital for r in rows],
    })


def render_categories_page(session: DashboardSession):
    """Render the category manager."""
    st.title("🏷️ Categories")

    with st.form("new_category_form", clear_on_submit=True):
        name = st.text_input("New category")
        if st.form_submit_button("➕ Add category"):
            if run_async(session.categories.add_category(name)):
                st.success(f"✅ Added '{name.strip()}'")
            else:
                st.error("❌ The name is empty or already used")

    st.markdown("---")

    for category in run_async(session.categories.list_categories()):
        col1, col2, col3, col4 = st.columns([3, 1, 1, 1])
        with col1:
            new_name = st.text_input("Name", value=category.name, key=f"name_{category.id}",
                                     label_visibility="collapsed")
        with col2:
            color = st.color_picker("Color", value=category.color, key=f"color_{category.id}",
                                    label_visibility="collapsed")
        with col3:
            if st.button("💾", key=f"save_{category.id}"):
                ok = True
                if new_name != category.name:
                    ok = run_async(session.categories.rename_category(category.id, new_name))
                if color != category.color:
                    ok = run_async(session.categories.update_color(category.id, color)) and ok
                if ok:
                    st.rerun()
                else:
                    st.error("❌ The name is empty or already used")
        with col4:
            if not category.is_default and st.button("🗑️", key=f"del_{category.id}"):
                run_async(session.categories.remove_category(category.id))
                st.rerun()


def render_settings_page(session: DashboardSession):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Account")
    if session.is_demo:
        st.info("Not signed in (demo mode)")
    else:
        st.markdown(f"Signed in as **{session.identity.display_name or session.identity.email}**")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Google Sheets (Storage)", "google_sheets"),
        ("Identity", "identity"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file with your Google Sheets "
        "credentials and spreadsheet ID. See `.env.example` for the required variables."
    )


if __name__ == "__main__":
    main()
