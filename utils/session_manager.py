import anyio
import streamlit as st
from infrastructure import config
from infrastructure.http.api_client import ApiClient
from use_cases.auth_flow import AuthOrchestrator
from use_cases.domain_models import AnonWorkSnapshot, NavigationTarget

"""
SESSION STATE CONTRACT

This module owns the Streamlit session state of one browser session.

Keys in st.session_state:

anon_messages: list
    chat messages written before signing in
    default: []
    owner: SessionStateAnonWorkTracker

anon_fs_data: dict
    serialized file-system state captured before signing in
    default: {}
    owner: SessionStateAnonWorkTracker

api_client: ApiClient | None
    HTTP client whose cookie jar carries the auth-token cookie
    default: None
    owner: session_manager

auth_orchestrator: AuthOrchestrator | None
    sign-in / sign-up entry points for this browser session
    default: None
    owner: session_manager

current_project_id: str | None
    project the user was routed to after authentication
    default: None
    owner: session_manager
"""

ANON_MESSAGES_KEY = "anon_messages"
ANON_FS_KEY = "anon_fs_data"


class SessionStateAnonWorkTracker:
    """Anonymous work kept in the (process-local) Streamlit session state."""

    def __init__(self, state=None):
        self.state = st.session_state if state is None else state

    def record(self, messages, file_system_data=None):
        # Only keep work that contains at least one message.
        if not messages:
            return
        self.state[ANON_MESSAGES_KEY] = list(messages)
        self.state[ANON_FS_KEY] = dict(file_system_data or {})

    def read(self):
        messages = self.state.get(ANON_MESSAGES_KEY)
        if messages is None:
            return None
        return AnonWorkSnapshot(messages=list(messages), file_system_data=dict(self.state.get(ANON_FS_KEY) or {}))

    def clear(self):
        self.state[ANON_MESSAGES_KEY] = []
        self.state[ANON_FS_KEY] = {}


def init_session_state():
    if ANON_MESSAGES_KEY not in st.session_state:
        st.session_state[ANON_MESSAGES_KEY] = []
    if ANON_FS_KEY not in st.session_state:
        st.session_state[ANON_FS_KEY] = {}
    if "api_client" not in st.session_state:
        st.session_state.api_client = None
    if "auth_orchestrator" not in st.session_state:
        st.session_state.auth_orchestrator = None
    if "current_project_id" not in st.session_state:
        st.session_state.current_project_id = None


def navigate_to(target: NavigationTarget):
    st.session_state.current_project_id = target.project_id
    st.query_params["project"] = target.project_id


def get_api_client() -> ApiClient:
    if st.session_state.get("api_client") is None:
        st.session_state.api_client = ApiClient(config.get_client_settings().api_base_url)
    return st.session_state.api_client


def get_orchestrator() -> AuthOrchestrator:
    if st.session_state.get("auth_orchestrator") is None:
        client = get_api_client()
        st.session_state.auth_orchestrator = AuthOrchestrator(
            credentials=client,
            projects=client,
            anon_work=SessionStateAnonWorkTracker(),
            navigate=navigate_to,
        )
    return st.session_state.auth_orchestrator


def sign_in(email, password):
    return anyio.run(get_orchestrator().sign_in, email, password)


def sign_up(email, password):
    return anyio.run(get_orchestrator().sign_up, email, password)


def logout():
    client = st.session_state.get("api_client")
    if client is not None:
        client.sign_out_sync()
    st.session_state.current_project_id = None
    st.query_params.clear()
    st.rerun()
