import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
from datetime import date

import streamlit as st
import pandas as pd
import numpy as np
import plotly.graph_objects as go
import plotly.express as px

from core import config
from core.aggregation import (
    account_flows, budget_usage, category_expense_distribution, monthly_series,
    total_balance, totals_by_type, PERIODS,
)
from core.auth import authenticate, register_user
from core.backup import export_backup, import_backup
from core.domain import (
    Account, AccountType, AppPreferences, CalendarEvent, Category, EventType, Recurrence,
    Transaction, TransactionType,
)
from core.filters import REPORT_FILTERS
from core.formatting import format_currency
from core.preferences import load_preferences, reset_financial_data, save_preferences
from core.projection import events_on, project_pending, search_events, sort_pending
from core.reports import category_frame, export_report_csv, export_report_json, monthly_frame, report_frame
from core.services import Ledger, ReportService
from core.storage import LocalStore

config.configure_logging()
config.ensure_data_directories()
st.set_page_config(page_title="Finance Manager", layout="wide")

COLOR_OPTIONS = {
    "Blue": "#3B82F6", "Green": "#10B981", "Red": "#EF4444", "Yellow": "#F59E0B",
    "Purple": "#8B5CF6", "Pink": "#EC4899", "Gray": "#6B7280", "Teal": "#06B6D4",
}


if "ledger" not in st.session_state:
    st.session_state.ledger = Ledger(LocalStore(config.DATA_DIR))
ledger: Ledger = st.session_state.ledger
store = ledger.store
prefs = load_preferences(store)
template = "plotly_dark" if prefs.dark_mode else "plotly_white"


def money(amount: float) -> str:
    return format_currency(amount, prefs.currency, prefs.language)


def notify(result, success: str) -> bool:
    if result.is_left():
        st.error(result.get_error()["message"])
        return False
    st.success(success)
    return True


# ---- login -----------------------------------------------------------------
if "user" not in st.session_state:
    st.title("💰 Finance Manager")
    login_tab, register_tab = st.tabs(["Login", "Register"])
    with login_tab:
        with st.form("login_form"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Log in")
        if submitted:
            with st.spinner("Checking credentials..."):
                result = asyncio.run(authenticate(store, username, password))
            if result.is_right():
                st.session_state.user = result.get_or_else(None)
                st.rerun()
            st.error(result.get_error()["message"])
    with register_tab:
        with st.form("register_form"):
            full_name = st.text_input("Full name")
            new_username = st.text_input("Username", key="reg_username")
            new_password = st.text_input("Password", type="password", key="reg_password")
            registered = st.form_submit_button("Create account")
        if registered:
            notify(register_user(store, new_username, new_password, full_name), "User created, you can log in now")
    st.stop()

user = st.session_state.user
st.sidebar.markdown("### 👤 Profile")
st.sidebar.caption(f"Hello, {user.full_name or user.username}!")
if st.sidebar.button("Log out"):
    del st.session_state["user"]
    st.rerun()

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "🗂 Accounts & Categories", "🧾 Transactions", "📅 Calendar", "📑 Reports", "⚙️ Settings"]
)

accounts = ledger.accounts.all()
categories = ledger.categories.all()
transactions = ledger.transactions.all()
events = ledger.calendar.all()
today = date.today()

if menu == "🏠 Overview":
    st.title("🏠 Overview")
    totals = totals_by_type(transactions)
    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Total Balance", money(total_balance(accounts)))
    with k2:
        st.metric("Income", money(totals["income"]))
    with k3:
        st.metric("Expenses", money(totals["expense"]))

    left, right = st.columns(2)
    with left:
        dist = category_expense_distribution(categories, transactions)
        if dist:
            df_cat = pd.DataFrame(dist)
            fig_cat = px.pie(
                df_cat, values="value", names="name", title="Expenses by Category",
                color="name", color_discrete_map={r["name"]: r["color"] for r in dist},
                template=template,
            )
            st.plotly_chart(fig_cat, use_container_width=True)
        else:
            st.info("No expenses recorded yet.")
    with right:
        series = monthly_series(transactions, today.year, prefs.language)
        labels = [m["label"] for m in series]
        fig_ts = go.Figure()
        fig_ts.add_trace(go.Scatter(x=labels, y=np.array([m["income"] for m in series]), mode="lines+markers", name="Income"))
        fig_ts.add_trace(go.Scatter(x=labels, y=np.array([m["expense"] for m in series]), mode="lines+markers", name="Expense"))
        fig_ts.update_layout(template=template, title=f"Income and expenses in {today.year}", margin=dict(t=40, b=10, l=10, r=10))
        st.plotly_chart(fig_ts, use_container_width=True)

    flows = account_flows(accounts, transactions)
    if flows:
        df_flows = pd.DataFrame(flows).melt(id_vars=["name"], value_vars=["income", "expense"], var_name="type", value_name="amount")
        fig_acc = px.bar(df_flows, x="name", y="amount", color="type", barmode="group", title="Income and expenses by account", template=template)
        st.plotly_chart(fig_acc, use_container_width=True)

    st.subheader("⏰ Pending items")
    pending = sort_pending(project_pending(events, today))
    for item in pending:
        c1, c2, c3, c4 = st.columns([3, 2, 2, 1])
        c1.write(f"**{item.title}** ({item.type.value})")
        c2.write(f"Due {item.due_date}")
        c3.write(money(item.amount))
        if item.is_paid:
            c4.success("Paid")
            continue
        if item.is_overdue:
            c3.error("Overdue")
        if c4.button("Pay", key=f"pay_{item.id}"):
            ledger.calendar.mark_paid(item.id, today)
            st.rerun()
    if not pending:
        st.info("No calendar events.")

elif menu == "🗂 Accounts & Categories":
    st.title("🗂 Accounts & Categories")
    acc_tab, cat_tab = st.tabs(["💳 Accounts", "🏷 Categories"])

    with acc_tab:
        for acc in accounts:
            with st.expander(f"{acc.name} · {money(acc.balance)} ({acc.type.value})"):
                with st.form(f"acc_form_{acc.id}"):
                    name = st.text_input("Name", value=acc.name)
                    balance = st.number_input("Balance", value=float(acc.balance), step=100.0, format="%.2f")
                    acc_type = st.selectbox("Type", [t.value for t in AccountType], index=[t for t in AccountType].index(acc.type))
                    close_date = st.text_input("Close date (credit only, YYYY-MM-DD)", value=acc.close_date or "")
                    save = st.form_submit_button("Save")
                if save:
                    result = ledger.accounts.update(
                        acc.id, name=name, balance=balance, type=AccountType(acc_type), close_date=close_date or None
                    )
                    if notify(result, "Account updated"):
                        st.rerun()
                if st.button("Delete", key=f"del_acc_{acc.id}"):
                    if notify(ledger.accounts.remove(acc.id), "Account removed"):
                        st.rerun()

        st.subheader("➕ New account")
        with st.form("new_account", clear_on_submit=True):
            name = st.text_input("Name")
            balance = st.number_input("Initial balance", value=0.0, step=100.0, format="%.2f")
            acc_type = st.selectbox("Type", [t.value for t in AccountType])
            color = st.selectbox("Color", list(COLOR_OPTIONS))
            close_date = st.text_input("Close date (credit only, YYYY-MM-DD)")
            submitted = st.form_submit_button("Add account")
        if submitted:
            draft = Account(
                id="", name=name, balance=balance, type=AccountType(acc_type),
                color=COLOR_OPTIONS[color], close_date=close_date or None,
            )
            if notify(ledger.accounts.add(draft), "Account added"):
                st.rerun()

    with cat_tab:
        usage = {u["id"]: u for u in budget_usage(categories, transactions)}
        for cat in categories:
            with st.expander(f"{cat.name} ({cat.type.value})"):
                if cat.id in usage:
                    u = usage[cat.id]
                    st.write(f"{money(u['spent'])} / {money(u['budget'])}")
                    st.progress(u["progress"] / 100)
                with st.form(f"cat_form_{cat.id}"):
                    name = st.text_input("Name", value=cat.name)
                    cat_type = st.selectbox("Type", [t.value for t in TransactionType], index=[t for t in TransactionType].index(cat.type))
                    budget = st.number_input("Budget", min_value=0.0, value=float(cat.budget or 0), step=50.0)
                    save = st.form_submit_button("Save")
                if save:
                    result = ledger.categories.update(
                        cat.id, name=name, type=TransactionType(cat_type), budget=budget or None
                    )
                    if notify(result, "Category updated"):
                        st.rerun()
                if st.button("Delete", key=f"del_cat_{cat.id}"):
                    if notify(ledger.categories.remove(cat.id), "Category removed"):
                        st.rerun()

        st.subheader("➕ New category")
        with st.form("new_category", clear_on_submit=True):
            name = st.text_input("Name")
            cat_type = st.selectbox("Type", [t.value for t in TransactionType], index=1)
            color = st.selectbox("Color", list(COLOR_OPTIONS))
            budget = st.number_input("Budget", min_value=0.0, value=0.0, step=50.0)
            submitted = st.form_submit_button("Add category")
        if submitted:
            draft = Category(id="", name=name, color=COLOR_OPTIONS[color], type=TransactionType(cat_type), budget=budget or None)
            if notify(ledger.categories.add(draft), "Category added"):
                st.rerun()

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")
    acc_names = {a.name: a.id for a in accounts}
    cat_names = {c.name: c.id for c in categories}

    st.subheader("➕ Add New Transaction")
    with st.form("input_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            tx_date = st.date_input("Date", value=today)
            amount = st.number_input("Amount", min_value=0.0, step=10.0, format="%.2f")
            description = st.text_input("Description")
        with col2:
            category = st.selectbox("Category", list(cat_names))
            account = st.selectbox("Account", list(acc_names))
        submitted = st.form_submit_button("Add Transaction")
    if submitted and category and account:
        cat = ledger.categories.get(cat_names[category]).get_or_else(None)
        draft = Transaction(
            id="", description=description, amount=amount, date=tx_date.isoformat(),
            category=cat.id, type=cat.type, account_id=acc_names[account],
        )
        before = len(ledger.transactions.alerts)
        if notify(ledger.transactions.add(draft), "✅ Transaction added!"):
            for alert in ledger.transactions.alerts[before:]:
                st.warning(f"⚠️ {alert['alert']}")

    st.divider()
    if transactions:
        df = pd.DataFrame([
            {
                "id": t.id, "date": t.date, "description": t.description,
                "category": next((c.name for c in categories if c.id == t.category), t.category),
                "account": next((a.name for a in accounts if a.id == t.account_id), t.account_id),
                "type": t.type.value, "amount": money(t.amount),
            }
            for t in sorted(transactions, key=lambda t: t.date, reverse=True)
        ])
        st.dataframe(df, use_container_width=True, hide_index=True)
        to_delete = st.selectbox("Delete transaction", [""] + [t.id for t in transactions])
        if to_delete and st.button("Delete", key="btn_del_tx"):
            if notify(ledger.transactions.remove(to_delete), "Transaction removed"):
                st.rerun()
    else:
        st.info("No transactions yet.")

elif menu == "📅 Calendar":
    st.title("📅 Financial Calendar")
    col_day, col_search = st.columns(2)
    with col_day:
        selected = st.date_input("Day", value=today)
        day_events = events_on(events, selected)
        st.write(f"{len(day_events)} event(s) on {selected.isoformat()}")
        for e in day_events:
            st.write(f"- **{e.title}** {money(e.amount)} ({e.type.value}, {e.recurrence.value})")
    with col_search:
        query = st.text_input("Search events")

    for e in search_events(events, query):
        with st.expander(f"{e.date} · {e.title} · {money(e.amount)}"):
            with st.form(f"event_form_{e.id}"):
                title = st.text_input("Title", value=e.title)
                ev_date = st.date_input("Date", value=date.fromisoformat(e.date))
                amount = st.number_input("Amount", min_value=0.0, value=float(e.amount), step=10.0)
                ev_type = st.selectbox("Type", [t.value for t in EventType], index=[t for t in EventType].index(e.type))
                recurrence = st.selectbox("Recurrence", [r.value for r in Recurrence], index=[r for r in Recurrence].index(e.recurrence))
                description = st.text_input("Description", value=e.description)
                save = st.form_submit_button("Save")
            if save:
                result = ledger.calendar.update(
                    e.id, title=title, date=ev_date.isoformat(), amount=amount,
                    type=EventType(ev_type), recurrence=Recurrence(recurrence), description=description,
                )
                if notify(result, "Event updated"):
                    st.rerun()
            if st.button("Delete", key=f"del_ev_{e.id}"):
                if notify(ledger.calendar.remove(e.id), "Event removed"):
                    st.rerun()

    st.subheader("➕ New event")
    with st.form("new_event", clear_on_submit=True):
        title = st.text_input("Title")
        ev_date = st.date_input("Date", value=today, key="new_ev_date")
        amount = st.number_input("Amount", min_value=0.0, step=10.0)
        ev_type = st.selectbox("Type", [t.value for t in EventType], index=1)
        recurrence = st.selectbox("Recurrence", [r.value for r in Recurrence])
        description = st.text_input("Description")
        submitted = st.form_submit_button("Add event")
    if submitted:
        draft = CalendarEvent(
            id="", title=title, date=ev_date.isoformat(), amount=amount,
            type=EventType(ev_type), recurrence=Recurrence(recurrence), description=description,
        )
        if notify(ledger.calendar.add(draft), "Event added"):
            st.rerun()

elif menu == "📑 Reports":
    st.title("📑 Reports")
    col1, col2, col3 = st.columns(3)
    with col1:
        period = st.selectbox("Period", list(PERIODS))
        start = end = None
        if period == "custom":
            picked = st.date_input("Range", value=(today.replace(day=1), today))
            if len(picked) == 2:
                start, end = picked
    with col2:
        filter_kind = st.selectbox("Filter", list(REPORT_FILTERS))
    with col3:
        filter_value = None
        if filter_kind == "category":
            names = {c.name: c.id for c in categories}
            filter_value = names.get(st.selectbox("Category", list(names)))
        elif filter_kind == "account":
            names = {a.name: a.id for a in accounts}
            filter_value = names.get(st.selectbox("Account", list(names)))
    show_steps = st.checkbox("Show intermediate steps", value=False)

    if period == "custom" and (start is None or end is None):
        st.info("Pick a start and end date.")
        st.stop()

    rpt = ReportService(ledger).generate(period, filter_kind, filter_value, today=today, start=start, end=end)
    totals = rpt["result"]["totals"]
    st.caption(f"{rpt['period']['start']} → {rpt['period']['end']}")
    m1, m2, m3 = st.columns(3)
    m1.metric("Income", money(totals["income"]))
    m2.metric("Expenses", money(totals["expense"]))
    m3.metric("Net", money(totals["net"]))

    df_cat = category_frame(rpt)
    if not df_cat.empty:
        fig = px.bar(df_cat, x="name", y="value", title="Spending by category", template=template)
        st.plotly_chart(fig, use_container_width=True)
    df_month = monthly_frame(rpt)
    fig_m = px.bar(df_month, x="label", y=["income", "expense"], barmode="group", title="Monthly totals", template=template)
    st.plotly_chart(fig_m, use_container_width=True)

    df_rows = report_frame(rpt)
    if not df_rows.empty:
        st.dataframe(df_rows, use_container_width=True, hide_index=True)
    else:
        st.info("No transactions in the selected period.")
    d1, d2 = st.columns(2)
    d1.download_button("⬇ Download CSV", export_report_csv(rpt), file_name=f"report_{period}.csv", mime="text/csv")
    d2.download_button("⬇ Download JSON", export_report_json(rpt), file_name=f"report_{period}.json", mime="application/json")

    if show_steps:
        with st.expander("Intermediate steps", expanded=False):
            for s in rpt["steps"]:
                st.write(s["aggregator"], s["output"])

elif menu == "⚙️ Settings":
    st.title("⚙️ Settings")
    with st.form("prefs_form"):
        dark_mode = st.toggle("Dark mode", value=prefs.dark_mode)
        currency = st.selectbox("Currency", ["BRL", "USD", "EUR", "GBP"], index=["BRL", "USD", "EUR", "GBP"].index(prefs.currency) if prefs.currency in ["BRL", "USD", "EUR", "GBP"] else 0)
        language = st.selectbox("Language", ["pt-BR", "en-US"], index=0 if prefs.language == "pt-BR" else 1)
        email_reports = st.toggle("Email reports", value=prefs.email_reports)
        saved = st.form_submit_button("Save preferences")
    if saved:
        save_preferences(store, AppPreferences(dark_mode, currency, language, email_reports))
        st.success("Preferences saved")
        st.rerun()

    st.subheader("💾 Backup")
    st.download_button("⬇ Export data", export_backup(ledger), file_name="finance_backup.json", mime="application/json")
    uploaded = st.file_uploader("Import backup", type=["json"])
    if uploaded is not None and st.button("Import", key="btn_import"):
        if notify(import_backup(ledger, uploaded.getvalue()), "Backup imported"):
            st.rerun()

    st.subheader("🗑 Data")
    st.caption("All data is stored locally. Resetting restores the initial accounts, categories, transactions and events.")
    if st.button("Reset financial data", key="btn_reset"):
        reset_financial_data(store)
        st.success("Financial data reset")
        st.rerun()
