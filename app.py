"""
Stationery Tracker

A Streamlit front end for requisition reports and stock.
Run with: streamlit run app.py
"""

import sys
import asyncio
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

import streamlit as st
import plotly.graph_objects as go

from stationery_tracker import settings
from stationery_tracker.clients import JsonFileStorage
from stationery_tracker.core import (
    ReportData,
    ReportStatus,
    available_years,
    filter_reports,
    format_items,
    reports_frame,
    stock_frame,
)
from stationery_tracker.core.auth import AuthStore, UserRole
from stationery_tracker.errors import StationeryError
from stationery_tracker.logger import setup_logger
from stationery_tracker.tracker import StationeryTracker

# Page config
st.set_page_config(
    page_title="Stationery Tracker",
    page_icon="📦",
    layout="wide",
)


@st.cache_resource
def get_tracker() -> tuple[StationeryTracker, AuthStore]:
    """
    One tracker and user list per process, shared by every session.

    Who is logged in and which report is being edited live in
    st.session_state; the saved values only seed a new session.
    """
    setup_logger("stationery_tracker")
    storage = JsonFileStorage(settings.DATA_DIR)
    return StationeryTracker(storage), AuthStore(storage)


tracker, auth = get_tracker()

if "user_id" not in st.session_state:
    saved_user = auth.current_user
    st.session_state.user_id = saved_user.id if saved_user else None
if "selected_id" not in st.session_state:
    st.session_state.selected_id = tracker.selected_report_id


def show_error(error: StationeryError):
    st.error(f"**{error.title}**: {error.message}")


def select_report(report_id):
    report = tracker.select_report(report_id)
    st.session_state.selected_id = report.id if report else None
    st.session_state.confirm_delete = None


def clear_selection():
    # The tracker clears its saved selection after every commit
    st.session_state.selected_id = None
    st.session_state.confirm_delete = None


# --- Login ---
user = auth.find_user(st.session_state.user_id)
if user is None:
    st.title("📦 Stationery Tracker")
    with st.form("login"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Sign in"):
            user = auth.login(username, password)
            if user:
                st.session_state.user_id = user.id
                st.rerun()
            st.error("Invalid username or password.")
    st.stop()

views = ["Reports", "Dashboard"] + (["Control Panel"] if user.is_admin else [])
view = st.sidebar.radio("View", views)
st.sidebar.caption(f"Signed in as **{user.username}** ({user.role.value})")
if st.sidebar.button("Log out"):
    auth.logout()
    st.session_state.user_id = None
    st.rerun()


def report_form(selected):
    """Create/edit form; selected is the report being edited or None."""
    base = selected or ReportData()
    with st.form("report"):
        c1, c2 = st.columns(2)
        requester = c1.text_input("Requester Name", base.requester_name)
        campus_options = [""] + settings.CAMPUS_OPTIONS
        campus = c2.selectbox(
            "Campus",
            campus_options,
            index=campus_options.index(base.campus) if base.campus in campus_options else 0,
        )
        import_date = c1.text_input("Import Date (YYYY-MM-DD)", base.import_date)
        export_date = c2.text_input("Export Date (YYYY-MM-DD)", base.export_date)
        status = st.radio(
            "Status",
            [s.value for s in ReportStatus],
            index=1 if base.is_done else 0,
            horizontal=True,
        )

        items = {}
        for row in (settings.STATIONARY_ITEMS_ROW1, settings.STATIONARY_ITEMS_ROW2):
            cols = st.columns(6)
            for i, item in enumerate(row):
                items[item] = cols[i % 6].number_input(
                    item, min_value=0, step=1, value=base.items.get(item, 0)
                )

        data = ReportData(requester, campus, import_date, export_date, items, status)
        save = st.form_submit_button("Update Report" if selected else "Add Report")

    if save:
        try:
            if selected:
                tracker.update_report(selected.id, data)
            else:
                tracker.create_report(data)
        except StationeryError as e:
            show_error(e)
        else:
            clear_selection()
            st.rerun()

    if selected:
        c1, c2 = st.columns(2)
        if c1.button("Delete Report", type="primary"):
            st.session_state.confirm_delete = selected.id
        if c2.button("Cancel"):
            select_report(None)
            st.rerun()

        if st.session_state.get("confirm_delete") == selected.id:
            st.warning("Are you sure you want to delete this report? This cannot be undone.")
            y, n = st.columns(2)
            if y.button("Yes, delete it"):
                tracker.delete_report(selected.id)
                clear_selection()
                st.rerun()
            if n.button("Keep it"):
                st.session_state.confirm_delete = None
                st.rerun()


if view == "Reports":
    st.title("Reports Management")

    top1, top2 = st.columns(2)
    with top1:
        upload = st.file_uploader("Import PDF", type=["pdf"])
        if upload is not None and st.button("Import"):
            with st.spinner("Importing..."):
                outcome = asyncio.run(tracker.import_from_document(upload.getvalue()))
            if outcome.ok:
                clear_selection()
            if outcome.is_demo:
                st.info(f"**{outcome.error.title}**: {outcome.error.message}")
            elif outcome.ok:
                st.success(
                    f"Successfully imported {len(outcome.payload.reports)} reports "
                    "and replaced the stock inventory."
                )
            else:
                show_error(outcome.error)
    with top2:
        if st.button("Export All PDF", disabled=len(tracker.reports) == 0):
            try:
                path = tracker.export_full_report()
            except StationeryError as e:
                show_error(e)
            else:
                st.download_button("Download", path.read_bytes(), file_name=path.name)

    selected = tracker.reports.find(st.session_state.selected_id)
    st.subheader("Edit Report" if selected else "New Report")
    report_form(selected)

    st.divider()
    st.subheader("Reports")
    reports = tracker.reports.list_reports()
    f1, f2, f3 = st.columns(3)
    campus_filter = f1.selectbox("Campus", ["All"] + settings.CAMPUS_OPTIONS)
    year_filter = f2.selectbox("Year", ["All"] + available_years(reports))
    month_filter = f3.selectbox("Month", ["All"] + [str(m) for m in range(1, 13)])
    filtered = filter_reports(
        reports,
        campus=None if campus_filter == "All" else campus_filter,
        year=None if year_filter == "All" else int(year_filter),
        month=None if month_filter == "All" else int(month_filter),
    )

    if filtered:
        for report in filtered:
            label = f"{report.requester_name} · {report.campus} · {report.import_date} · {report.status.value}"
            if st.button(label, key=f"select-{report.id}"):
                select_report(report.id)
                st.rerun()
            st.caption(format_items(report.items))
        st.dataframe(reports_frame(filtered), use_container_width=True, hide_index=True)
    else:
        st.info("No reports match the current filters")

elif view == "Dashboard":
    st.title("Stock Dashboard")
    df = stock_frame(tracker.ledger)

    fig = go.Figure(
        data=[go.Bar(x=df["Item"], y=df["Quantity in Stock"], marker_color="#3498db")]
    )
    fig.update_layout(title="Quantity in Stock", height=350, margin=dict(t=40, b=20, l=20, r=20))
    st.plotly_chart(fig, use_container_width=True)

    edited = st.data_editor(
        df,
        use_container_width=True,
        hide_index=True,
        disabled=["Item", "Last Date In", "Last Date Out"],
    )
    c1, c2, c3 = st.columns(3)
    if c1.button("Save Stock"):
        tracker.edit_stock_bulk(dict(zip(edited["Item"], edited["Quantity in Stock"])))
        st.rerun()
    if c2.button("Export Stock PDF"):
        try:
            path = tracker.export_stock_report()
        except StationeryError as e:
            show_error(e)
        else:
            st.download_button("Download", path.read_bytes(), file_name=path.name)
    if c3.button("Clear Stock", type="primary"):
        tracker.clear_stock()
        st.rerun()

elif view == "Control Panel":
    st.title("Admin Control Panel")
    st.metric("AI Service", "Configured" if settings.is_ai_configured() else "Not Configured")

    with st.form("add-user"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        role = st.selectbox("Role", [r.value for r in UserRole], index=1)
        if st.form_submit_button("Add User"):
            try:
                auth.add_user(username, password, UserRole(role))
            except StationeryError as e:
                show_error(e)
            else:
                st.rerun()

    for u in auth.users:
        c1, c2 = st.columns([4, 1])
        c1.write(f"**{u.username}** ({u.role.value})")
        is_self = u.id == user.id
        if c2.button(
            "Delete",
            key=f"delete-{u.id}",
            disabled=is_self,
            help="Cannot delete yourself" if is_self else None,
        ):
            try:
                auth.delete_user(u.id, acting_user_id=user.id)
            except StationeryError as e:
                show_error(e)
            else:
                st.rerun()
