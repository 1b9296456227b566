import streamlit as st
from infrastructure.http.api_client import ApiError
from utils import session_manager


def _submit(action, email, password, label):
    try:
        with st.spinner(label):
            result = action(email, password)
    except ApiError as e:
        st.error(f"Service unavailable: {e}")
        return
    if result.success:
        st.rerun()
    else:
        st.error(result.error or "Authentication failed.")


def render_auth_screen():
    st.title("Sign in to save your work")
    tab_login, tab_register = st.tabs(["Sign in", "Sign up"])

    busy = session_manager.get_orchestrator().is_loading

    with tab_login:
        with st.form("login_form", clear_on_submit=False):
            email = st.text_input("Email", key="login_email")
            password = st.text_input("Password", type="password", key="login_password")
            submitted = st.form_submit_button("Sign in", disabled=busy)
            if submitted:
                _submit(session_manager.sign_in, email, password, "Signing in...")

    with tab_register:
        with st.form("register_form", clear_on_submit=False):
            email = st.text_input("Email", key="register_email")
            password = st.text_input("Password", type="password", key="register_password")
            password_confirm = st.text_input("Confirm password", type="password", key="register_password_confirm")
            submitted = st.form_submit_button("Sign up", disabled=busy)
            if submitted:
                if password != password_confirm:
                    st.error("Passwords do not match.")
                else:
                    _submit(session_manager.sign_up, email, password, "Creating your account...")
