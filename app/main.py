"""
Streamlit Frontend for Points Tracker

The form, history and point-value views. All ledger logic lives in the
points_tracker package; this module only collects input, calls the
session, and re-renders from the session's snapshot.

The UI enforces the admin gate:
- Any change asks for the code the first time
- The change the user asked for runs once the code is accepted
- Cancel drops the pending change
"""

import streamlit as st

from points_tracker.config import validate_all_settings
from points_tracker.export import MIME_TYPE
from points_tracker.ledger import GateResult, GateStatus, IndexOutOfRange, UnknownSubject
from points_tracker.models.catalog import (
    BASE_POINTS,
    BONUSES,
    DEDUCTIONS,
    GRADE_EXPECTATIONS,
    EntryType,
    catalog_for,
)
from points_tracker.orchestrator import InvalidInputError, PointsSession, create_session
from points_tracker.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Points Tracker",
    page_icon="⭐",
    layout="centered",
)


def get_session() -> PointsSession:
    """One session per browser tab; the gate starts locked on every load."""
    if "points_session" not in st.session_state:
        st.session_state.points_session = create_session()
    return st.session_state.points_session


def handle_gate_result(result: GateResult) -> None:
    """Translate a gate outcome into UI state."""
    if result.status == GateStatus.EXECUTED:
        st.session_state.editing_index = None
        st.rerun()
    elif result.status == GateStatus.PROMPT:
        st.rerun()
    elif result.status == GateStatus.REJECTED:
        st.error("Incorrect code")


CODE_INPUT_KEY = "admin_code_input"


def submit_admin_code(session: PointsSession) -> None:
    """Submit button callback; the typed code is cleared whatever the outcome."""
    code = st.session_state.get(CODE_INPUT_KEY, "")
    st.session_state[CODE_INPUT_KEY] = ""
    try:
        result = session.submit_code(code)
    except IndexOutOfRange as e:
        st.session_state.code_error = str(e)
        return
    if result.status == GateStatus.EXECUTED:
        st.session_state.editing_index = None
    elif result.status == GateStatus.REJECTED:
        st.session_state.code_error = "Incorrect code"


def cancel_admin_code(session: PointsSession) -> None:
    st.session_state[CODE_INPUT_KEY] = ""
    session.cancel()


def render_code_prompt(session: PointsSession) -> None:
    """Code prompt shown while a change waits for the admin code."""
    with st.container(border=True):
        st.subheader("Enter Code")
        st.text_input(
            "Code",
            type="password",
            placeholder="Enter code to make changes",
            key=CODE_INPUT_KEY,
        )
        error = st.session_state.pop("code_error", None)
        if error:
            st.error(error)
        col1, col2 = st.columns(2)
        with col1:
            st.button("Submit", type="primary", on_click=submit_admin_code, args=(session,))
        with col2:
            st.button("Cancel", on_click=cancel_admin_code, args=(session,))


def render_balance(session: PointsSession) -> None:
    snapshot = session.snapshot()
    st.title(f"⭐ {snapshot.balance} points")
    st.caption(session.period_key)
    st.progress(min(100, max(0, snapshot.balance)) / 100)
    st.write(session.bonus_summary())
    if session.store.last_persistence_error:
        st.warning(
            "Changes could not be saved and will be lost when the page is closed: "
            f"{session.store.last_persistence_error}"
        )


def render_entry_form(session: PointsSession) -> None:
    entry_type = st.selectbox(
        "Entry Type",
        options=list(EntryType),
        index=None,
        placeholder="Select Entry Type",
        format_func=lambda t: t.value.title(),
    )

    try:
        if entry_type in (EntryType.DEDUCTION, EntryType.BONUS):
            items = catalog_for(entry_type)
            label = st.selectbox(
                f"Select {entry_type.value.title()}",
                options=[item.label for item in items],
                index=None,
                format_func=lambda l: next(
                    f"{i.label} ({i.points:+d})" for i in items if i.label == l
                ),
            )
            if label and st.button("Add"):
                handle_gate_result(session.add_catalog_entry(entry_type, label))

        elif entry_type == EntryType.GRADE:
            subject = st.selectbox(
                "Subject",
                options=list(GRADE_EXPECTATIONS),
                index=None,
                format_func=lambda s: (
                    f"{s} ({GRADE_EXPECTATIONS[s].min}-{GRADE_EXPECTATIONS[s].target})"
                ),
            )
            grade = st.text_input("Grade")
            if st.button("Add Grade"):
                handle_gate_result(session.add_grade(subject, grade))

        elif entry_type == EntryType.CUSTOM:
            description = st.text_input("Description")
            points = st.text_input("Points")
            if st.button("Add"):
                handle_gate_result(session.add_custom(description, points))

    except InvalidInputError as e:
        st.error(session.validator.get_user_friendly_summary(e.result))
    except UnknownSubject as e:
        st.error(str(e))


def render_history(session: PointsSession) -> None:
    st.subheader("History")
    for index, entry in enumerate(session.snapshot().entries):
        col1, col2, col3 = st.columns([6, 1, 1])
        with col1:
            st.write(f"{entry.date}: {entry.description} {'🤩' if entry.is_positive else ''}")
        with col2:
            st.write(f"{entry.delta:+d}" if entry.delta else "0")
        with col3:
            if st.button("⋮", key=f"edit-{index}"):
                st.session_state.editing_index = index
                st.rerun()

    filename, content = session.export_csv()
    st.download_button("Export History", data=content, file_name=filename, mime=MIME_TYPE)


def render_edit_form(session: PointsSession, index: int) -> None:
    entries = session.snapshot().entries
    if not 0 <= index < len(entries):
        st.session_state.editing_index = None
        return
    entry = entries[index]

    with st.form("edit-entry"):
        st.subheader("Edit Entry")
        date_text = st.text_input("Date", value=entry.date)
        description = st.text_input("Description", value=entry.description)
        points = st.text_input("Points", value=str(entry.delta))
        col1, col2, col3 = st.columns(3)
        save = col1.form_submit_button("Save", type="primary")
        delete = col2.form_submit_button("Delete")
        close = col3.form_submit_button("Close")

    try:
        if save:
            handle_gate_result(session.edit_entry(index, description, date_text, points))
        elif delete:
            handle_gate_result(session.delete_entry(index))
        elif close:
            st.session_state.editing_index = None
            st.rerun()
    except InvalidInputError as e:
        st.error(session.validator.get_user_friendly_summary(e.result))


def render_point_values() -> None:
    st.subheader("Grade Expectations")
    for subject, threshold in GRADE_EXPECTATIONS.items():
        st.write(f"**{subject}**: minimum {threshold.min}, target {threshold.target}")

    st.subheader("Point Values")
    for item in (*DEDUCTIONS, *BONUSES):
        st.write(f"{item.label}: {item.points:+d}")
    st.caption(f"Every month starts at {BASE_POINTS} points.")


def main():
    """Main application entry point."""
    checks = validate_all_settings()
    if not all(v for k, v in checks.items() if not k.endswith("_error")):
        st.error(f"Configuration problem: {checks}")
        st.stop()

    try:
        session = get_session()
    except StorageError as e:
        st.error(f"Could not open this month's points: {e}")
        st.stop()

    if "editing_index" not in st.session_state:
        st.session_state.editing_index = None

    render_balance(session)

    if session.gate.prompt_open:
        render_code_prompt(session)

    actions_tab, values_tab = st.tabs(["Actions", "Point Values"])
    with actions_tab:
        render_entry_form(session)
        if st.session_state.editing_index is not None:
            render_edit_form(session, st.session_state.editing_index)
        render_history(session)
    with values_tab:
        render_point_values()


if __name__ == "__main__":
    main()
