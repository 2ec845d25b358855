"""Shared sidebar components for the multi-page tracker.

Every page calls :func:`render_shared_sidebar` first. It signs the user in
(or renders the sign-in form), keeps the :class:`FinanceSession` in
``st.session_state`` and renders the display-currency selector.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

try:
    from .auth import LocalCredentialChecker
    from .currency import SUPPORTED_CURRENCIES
    from .errors import ValidationError
    from .logging_config import configure_logging
    from .session import FinanceSession, Notification
    from .storage import LocalStorage
except ImportError:
    # Fallback for when running as script
    import sys
    from pathlib import Path
    parent_dir = Path(__file__).resolve().parents[1]
    if str(parent_dir) not in sys.path:
        sys.path.insert(0, str(parent_dir))
    from finance_tracker.auth import LocalCredentialChecker
    from finance_tracker.currency import SUPPORTED_CURRENCIES
    from finance_tracker.errors import ValidationError
    from finance_tracker.logging_config import configure_logging
    from finance_tracker.session import FinanceSession, Notification
    from finance_tracker.storage import LocalStorage

SESSION_KEY = 'finance_session'
FLASH_KEY = 'finance_flash'


def _storage() -> LocalStorage:
    if 'finance_storage' not in st.session_state:
        configure_logging()
        st.session_state.finance_storage = LocalStorage()
    return st.session_state.finance_storage


def show_notification(notification: Notification) -> None:
    """Render a session notification the way the old toasts read."""
    if notification.is_error:
        st.error(f"**{notification.title}**: {notification.description}")
    else:
        st.success(f"**{notification.title}**: {notification.description}")


def flash(notification: Notification) -> None:
    """Keep a notification for the next run, for actions followed by ``st.rerun``."""
    st.session_state[FLASH_KEY] = notification


def _render_auth_form() -> None:
    checker = LocalCredentialChecker(_storage())
    login_tab, register_tab = st.sidebar.tabs(["Sign in", "Register"])

    with login_tab:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Sign in"):
                user = checker.authenticate(email, password)
                if user is None:
                    st.error("Invalid email or password")
                else:
                    st.session_state[SESSION_KEY] = FinanceSession(user, _storage())
                    st.rerun()

    with register_tab:
        with st.form("register_form"):
            name = st.text_input("Name")
            email = st.text_input("Email", key="register_email")
            password = st.text_input("Password", type="password", key="register_password")
            if st.form_submit_button("Create account"):
                try:
                    user = checker.register(name, email, password)
                except ValidationError as e:
                    st.error(str(e))
                else:
                    st.session_state[SESSION_KEY] = FinanceSession(user, _storage())
                    st.rerun()


def render_shared_sidebar() -> Optional[FinanceSession]:
    """Render sidebar elements available on all pages.

    Returns:
        The signed-in session, or ``None`` while the sign-in form is shown.
    """
    st.sidebar.title("💰 Finance Tracker")
    pending = st.session_state.pop(FLASH_KEY, None)
    if pending is not None:
        show_notification(pending)

    session: Optional[FinanceSession] = st.session_state.get(SESSION_KEY)
    if session is None:
        _render_auth_form()
        return None

    st.sidebar.markdown(f"Signed in as **{session.user.name}** ({session.user.email})")
    currency = st.sidebar.selectbox(
        "Display currency",
        options=list(SUPPORTED_CURRENCIES),
        index=list(SUPPORTED_CURRENCIES).index(session.currency),
    )
    if currency != session.currency:
        notification = session.set_currency(currency)
        if notification.is_error:
            show_notification(notification)
        else:
            st.rerun()

    if st.sidebar.button("🚪 Log out"):
        del st.session_state[SESSION_KEY]
        st.rerun()
    return session
