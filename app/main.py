"""
Streamlit Dashboard for Bills Agent

The page a household opens to see what is due this month, tick bills
off as paid, and ask the assistant questions.

DESIGN PRINCIPLES:
1. One page: totals, what's due soon, unpaid, paid, chat
2. Every change goes through the REST API (never the file directly)
3. Clear error messages when the API or the assistant is down

Run with:  streamlit run app/main.py
"""

from datetime import date

import httpx
import streamlit as st

from bills_agent.aggregation import search_bills, upcoming_bills
from bills_agent.api.client import ApiError, BillsApiClient
from bills_agent.config import get_settings
from bills_agent.models.bill import BillWithStatus, MonthlyTotals
from bills_agent.models.month import MonthKey


# Page configuration
st.set_page_config(
    page_title="Bills Agent",
    page_icon="💵",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .kpi-box {
        padding: 16px;
        border-radius: 12px;
        border: 1px solid #1e293b;
        background-color: #0f172a;
        margin: 6px 0;
    }
    .kpi-box.highlight {
        border-color: #059669;
    }
    .kpi-label {
        color: #94a3b8;
        font-size: 0.9em;
    }
    .big-number {
        font-size: 1.8em;
        font-weight: bold;
        color: #f1f5f9;
    }
</style>
""", unsafe_allow_html=True)


GREETING = (
    "Hi! I'm your bills assistant. Ask me anything about what's due, "
    "what's been paid, or how much you owe this month."
)
CHAT_FALLBACK = (
    "I couldn't reach the assistant service. Please check the server logs "
    "and ensure a Gemini API key is configured."
)


def currency(amount: float) -> str:
    return f"${amount:,.2f}"


@st.cache_resource
def get_client() -> BillsApiClient:
    """Get or create the API client (cached)."""
    return BillsApiClient(base_url=get_settings().app.api_url)


def init_session_state():
    if "chat_messages" not in st.session_state:
        st.session_state.chat_messages = [
            {"role": "assistant", "content": GREETING}
        ]
    if "editing" not in st.session_state:
        st.session_state.editing = None  # None = closed, {} = new, dict = edit


def main():
    """Main application entry point."""
    init_session_state()
    client = get_client()

    # Sidebar: month and search
    st.sidebar.title("💵 Bills Agent")
    st.sidebar.markdown("---")
    picked = st.sidebar.date_input(
        "Month",
        value=date.today().replace(day=1),
        help="Any day in the month you want to look at",
    )
    month = str(MonthKey.current(picked))
    query = st.sidebar.text_input("Search bills…", value="")
    if st.sidebar.button("➕ Add Bill", type="primary"):
        st.session_state.editing = {}

    try:
        summary = client.get_monthly_summary(month)
    except (ApiError, httpx.HTTPError) as e:
        st.error(f"Could not load bills from {get_settings().app.api_url}: {e}")
        st.stop()

    st.title("Bills Agent")
    st.markdown(f"Month: `{month}`")

    render_kpis(summary.totals)

    if st.session_state.editing is not None:
        render_bill_form(client)

    bills_col, chat_col = st.columns([2, 1])
    with bills_col:
        filtered = search_bills(summary.bills, query)
        if month == str(MonthKey.current()):
            render_upcoming(client, month, summary.bills)
        render_unpaid(client, month, [b for b in filtered if not b.is_paid], summary.totals)
        render_paid(client, month, [b for b in filtered if b.is_paid], summary.totals)
    with chat_col:
        render_chat(client, month)


def render_kpis(totals: MonthlyTotals):
    """Render the four headline numbers."""
    tiles = [
        ("Total This Month", totals.total_due, False),
        ("Recurring Obligations", totals.recurring_due, False),
        ("Paid So Far", totals.paid, False),
        ("Still Due", totals.remaining, True),
    ]
    for col, (label, value, highlight) in zip(st.columns(4), tiles):
        with col:
            st.markdown(f"""
            <div class="kpi-box{' highlight' if highlight else ''}">
                <div class="kpi-label">{label}</div>
                <div class="big-number">{currency(value)}</div>
            </div>
            """, unsafe_allow_html=True)


def _kind(bill: BillWithStatus) -> str:
    return "Recurring" if bill.is_recurring else "One-time"


def _toggle_paid(client: BillsApiClient, bill: BillWithStatus, month: str, is_paid: bool):
    try:
        client.set_paid_status(bill.id, month, is_paid)
    except (ApiError, httpx.HTTPError) as e:
        st.error(f"Could not update {bill.name}: {e}")
        return
    st.rerun()


def _delete(client: BillsApiClient, bill: BillWithStatus):
    try:
        client.delete_bill(bill.id)
    except (ApiError, httpx.HTTPError) as e:
        st.error(f"Could not delete {bill.name}: {e}")
        return
    st.rerun()


def render_upcoming(client: BillsApiClient, month: str, bills: list[BillWithStatus]):
    """Unpaid bills due in the next 7 days."""
    soon = upcoming_bills(bills, today=date.today(), days=7)
    st.subheader(f"Due in the next 7 days ({len(soon)})")
    if not soon:
        st.info("Nothing due in the next week 🎉")
        return
    for bill in soon:
        text_col, btn_col = st.columns([4, 1])
        text_col.markdown(
            f"**{bill.name}**  \nDue {bill.due_date_label} • "
            f"{currency(bill.amount)} • {_kind(bill)}"
        )
        if btn_col.button("Mark Paid", key=f"soon-paid-{bill.id}"):
            _toggle_paid(client, bill, month, True)


def _render_bill_rows(
    client: BillsApiClient,
    month: str,
    bills: list[BillWithStatus],
    prefix: str,
):
    header = st.columns([3, 2, 2, 3, 2, 4])
    for col, title in zip(header, ["Name", "Due Date", "Amount", "Notes", "Type", "Actions"]):
        col.markdown(f"**{title}**")

    for bill in bills:
        name_col, due_col, amount_col, notes_col, type_col, actions_col = st.columns(
            [3, 2, 2, 3, 2, 4]
        )
        name_col.write(bill.name)
        due_col.write(bill.due_date_label)
        amount_col.write(currency(bill.amount))
        notes_col.write(bill.notes or "")
        type_col.write(_kind(bill))
        paid_btn, edit_btn, delete_btn = actions_col.columns(3)
        toggle_label = "Mark Unpaid" if bill.is_paid else "Mark Paid"
        if paid_btn.button(toggle_label, key=f"{prefix}-paid-{bill.id}"):
            _toggle_paid(client, bill, month, not bill.is_paid)
        if edit_btn.button("Edit", key=f"{prefix}-edit-{bill.id}"):
            st.session_state.editing = bill.model_dump(by_alias=True)
            st.rerun()
        if delete_btn.button("Delete", key=f"{prefix}-delete-{bill.id}"):
            _delete(client, bill)


def render_unpaid(
    client: BillsApiClient,
    month: str,
    bills: list[BillWithStatus],
    totals: MonthlyTotals,
):
    st.subheader("Bills Due This Month")
    st.caption(f"{len(bills)} bill(s) • Remaining: {currency(totals.remaining)}")
    if not bills:
        st.success("Everything is paid for this month. Nice work!")
        return
    _render_bill_rows(client, month, bills, "unpaid")


def render_paid(
    client: BillsApiClient,
    month: str,
    bills: list[BillWithStatus],
    totals: MonthlyTotals,
):
    st.subheader("Paid This Month")
    st.caption(f"{len(bills)} bill(s) • Paid: {currency(totals.paid)}")
    if not bills:
        st.info("No payments recorded yet this month.")
        return
    _render_bill_rows(client, month, bills, "paid")


def render_bill_form(client: BillsApiClient):
    """Add/edit form; an empty `editing` dict means a new bill."""
    editing = st.session_state.editing
    is_edit = bool(editing.get("id"))

    with st.form("bill-form"):
        st.markdown(f"### {'Edit Bill' if is_edit else 'Add Bill'}")
        name = st.text_input("Name", value=editing.get("name", ""))
        due_day = st.number_input(
            "Due day", min_value=1, max_value=31, step=1,
            value=int(editing.get("dueDay", 1)),
        )
        amount = st.number_input(
            "Amount", min_value=0.0, step=1.0, format="%.2f",
            value=float(editing.get("amount", 0.0)),
        )
        notes = st.text_area("Notes", value=editing.get("notes", ""))
        is_recurring = st.checkbox(
            "Recurring every month", value=editing.get("isRecurring", True)
        )

        save_col, cancel_col = st.columns(2)
        save = save_col.form_submit_button("Save", type="primary")
        cancel = cancel_col.form_submit_button("Cancel")

    if cancel:
        st.session_state.editing = None
        st.rerun()

    if save:
        payload = {
            "name": name.strip(),
            "dueDay": int(due_day),
            "amount": float(amount),
            "notes": notes,
            "isRecurring": is_recurring,
        }
        try:
            if is_edit:
                client.update_bill(editing["id"], payload)
            else:
                client.create_bill(payload)
        except (ApiError, httpx.HTTPError) as e:
            st.error(f"Could not save: {e}")
            return
        st.session_state.editing = None
        st.rerun()


def render_chat(client: BillsApiClient, month: str):
    """Chat panel; history lives in session state only."""
    st.subheader("Bills Assistant")
    st.caption("Ask natural-language questions about your bills this month.")

    for msg in st.session_state.chat_messages:
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])

    if st.session_state.get("chat_error"):
        st.caption(f":red[{st.session_state.chat_error}]")

    question = st.chat_input("e.g. How much do I owe this month?")
    if not question:
        return

    st.session_state.chat_messages.append({"role": "user", "content": question})
    with st.spinner("Thinking…"):
        try:
            reply = client.chat(question, month=month)
        except (ApiError, httpx.HTTPError) as e:
            st.session_state.chat_error = str(e)
            reply = CHAT_FALLBACK
        else:
            st.session_state.chat_error = None
    st.session_state.chat_messages.append({"role": "assistant", "content": reply})
    st.rerun()


if __name__ == "__main__":
    main()
