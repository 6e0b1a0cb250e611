import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging

import streamlit as st
import pandas as pd
import plotly.express as px

from expenses.aggregation import list_months, default_selection
from expenses.config import get_settings
from expenses.domain import ALL, PaymentMethod
from expenses.errors import ExpenseDashboardError
from expenses.formatting import (
    EMPTY_SELECTION,
    PAYMENT_METHOD_LABELS,
    budget_status,
    category_label,
    format_change,
    format_currency,
    format_month_label,
    format_row_date,
    progress_fraction,
)
from expenses.log import configure_logging
from expenses.services import DashboardService, default_calculators
from expenses.transforms import load_seed

logger = logging.getLogger("expenses.app")

try:
    settings = get_settings()
except ExpenseDashboardError as e:
    st.error(f"❌ Configuration error: {e}")
    st.stop()

configure_logging(settings.log_level)
st.set_page_config(page_title=settings.title, layout="wide")

if "seed" not in st.session_state:
    try:
        st.session_state.seed = load_seed(settings.seed_path)
    except ExpenseDashboardError as e:
        logger.error("Dashboard not rendered: %s", e)
        st.error(f"❌ Seed data rejected: {e}")
        for err in getattr(e, "errors", []):
            st.write(f"- `{err['error']}`: {err['message']}")
        st.stop()
    except OSError as e:
        logger.error("Cannot read seed data: %s", e)
        st.error(f"❌ Cannot read seed data: {e}")
        st.stop()

transactions, budgets = st.session_state.seed

if "selection" not in st.session_state:
    st.session_state.selection = default_selection(transactions)

currency = settings.currency


def money(value):
    return format_currency(value, currency)


st.title(settings.title)
st.caption("Track where your money goes and stay aligned with your monthly budgets.")

months = list_months(transactions)
category_options = [ALL] + [b.category for b in budgets]

col_month, col_cat = st.columns(2)
with col_month:
    selection = st.session_state.selection
    month = st.selectbox(
        "Month",
        options=months,
        index=months.index(selection.month) if selection.month in months else 0,
        format_func=format_month_label,
    ) if months else None
with col_cat:
    category = st.selectbox(
        "Category",
        options=category_options,
        index=category_options.index(selection.category),
        format_func=category_label,
    )

st.session_state.selection = selection.with_month(month).with_category(category)
selection = st.session_state.selection

service = DashboardService(calculators=default_calculators())
report = service.summary(selection, transactions, budgets)
result = report["result"]

k1, k2, k3 = st.columns(3)
with k1:
    st.metric("This month", money(result["monthly_total"]))
    st.caption(format_change(result["month_over_month"]))
with k2:
    st.metric("Average per day", money(result["average_per_day"]))
    st.caption(f"Keep daily spending below {money(settings.daily_goal)} to hit your goals.")
with k3:
    st.markdown("**Payment mix**")
    for method in PaymentMethod:
        st.write(f"{PAYMENT_METHOD_LABELS[method]}: {money(result['payment_split'][method])}")

st.divider()

col_list, col_side = st.columns([2, 1])

with col_list:
    filtered = result["filtered"]
    st.subheader("🧾 Recent expenses")
    st.caption(f"{len(filtered)} items · {money(result['filtered_total'])}")

    if filtered:
        disp = pd.DataFrame([
            {
                "Description": t.description,
                "Note": t.note,
                "Category": category_label(t.category),
                "Payment": t.payment_method.value,
                "Amount": money(t.amount),
                "Date": format_row_date(t.date),
            }
            for t in filtered
        ])
        st.table(disp)

        export = pd.DataFrame([
            {
                "id": t.id,
                "date": t.date,
                "description": t.description,
                "category": t.category.value,
                "payment_method": t.payment_method.value,
                "amount": float(t.amount),
                "note": t.note,
            }
            for t in filtered
        ])
        st.download_button(
            "⬇ Download CSV",
            export.to_csv(index=False),
            file_name=f"expenses_{selection.month}.csv",
            mime="text/csv",
        )
    else:
        st.info(EMPTY_SELECTION)

    split = result["payment_split"]
    if any(split.values()):
        df_split = pd.DataFrame([
            {"Method": PAYMENT_METHOD_LABELS[m], "Amount": float(v)} for m, v in split.items()
        ])
        fig_split = px.pie(df_split, values="Amount", names="Method", title="Payment mix")
        fig_split.update_layout(height=300)
        st.plotly_chart(fig_split, use_container_width=True)

with col_side:
    st.subheader("💰 Budget tracker")
    breakdown = result["category_breakdown"]
    for row in breakdown:
        st.write(f"**{category_label(row.category)}** {money(row.actual)} / {money(row.budget)}")
        st.progress(progress_fraction(row.utilization))
        st.caption(budget_status(row.utilization))

    st.subheader("💡 Quick insights")
    top = result["highest_expense"]
    active = result["most_active_category"]
    if top is not None:
        st.write(f"Highest expense: {top.description} at {money(top.amount)}")
    if active is not None:
        st.write(f"Most active category: {category_label(active)}")
    st.write(f"Cash purchases this month: {money(result['payment_split'][PaymentMethod.CASH])}")

if breakdown:
    df_budget = pd.DataFrame([
        {"Category": category_label(r.category), "Actual": float(r.actual), "Budget": float(r.budget)}
        for r in breakdown
    ])
    fig = px.bar(
        df_budget,
        x="Category",
        y=["Actual", "Budget"],
        barmode="group",
        title=f"Spending vs budget, {format_month_label(selection.month)}",
        template="plotly_dark",
    )
    st.plotly_chart(fig, use_container_width=True)
