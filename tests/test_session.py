from unittest.mock import MagicMock, patch

import streamlit as st

from use_cases.auth_flow import AuthOrchestrator
from use_cases.domain_models import AnonWorkSnapshot, NavigationTarget
from utils import session_manager


def test_init_session_state():
    st.session_state.clear()
    session_manager.init_session_state()
    assert st.session_state.anon_messages == []
    assert st.session_state.anon_fs_data == {}
    assert st.session_state.api_client is None
    assert st.session_state.current_project_id is None


def test_tracker_read_returns_none_before_any_work():
    tracker = session_manager.SessionStateAnonWorkTracker(state={})
    assert tracker.read() is None


def test_tracker_record_and_read():
    state = {}
    tracker = session_manager.SessionStateAnonWorkTracker(state=state)

    tracker.record([{"role": "user", "content": "Hello"}], {"files": {"/App.jsx": "..."}})

    assert tracker.read() == AnonWorkSnapshot(
        messages=[{"role": "user", "content": "Hello"}],
        file_system_data={"files": {"/App.jsx": "..."}},
    )


def test_tracker_ignores_work_without_messages():
    state = {}
    tracker = session_manager.SessionStateAnonWorkTracker(state=state)
    tracker.record([], {"files": {"/App.jsx": "..."}})
    assert tracker.read() is None


def test_tracker_clear_empties_snapshot():
    tracker = session_manager.SessionStateAnonWorkTracker(state={})
    tracker.record([{"role": "user", "content": "Hello"}])

    tracker.clear()

    snapshot = tracker.read()
    assert snapshot.messages == []
    assert snapshot.file_system_data == {}


def test_navigate_to_sets_current_project():
    st.session_state.clear()
    session_manager.init_session_state()
    with patch.object(session_manager.st, "query_params", {}) as params:
        session_manager.navigate_to(NavigationTarget("p1"))
        assert params["project"] == "p1"
    assert st.session_state.current_project_id == "p1"


def test_get_orchestrator_wires_api_client(settings):
    st.session_state.clear()
    session_manager.init_session_state()

    orchestrator = session_manager.get_orchestrator()

    assert isinstance(orchestrator, AuthOrchestrator)
    assert orchestrator.credentials is st.session_state.api_client
    assert orchestrator.projects is st.session_state.api_client
    assert session_manager.get_orchestrator() is orchestrator


@patch("streamlit.rerun")
def test_logout(mock_rerun):
    st.session_state.clear()
    session_manager.init_session_state()
    client = MagicMock()
    st.session_state.api_client = client
    st.session_state.current_project_id = "p1"

    with patch.object(session_manager.st, "query_params", MagicMock()):
        session_manager.logout()

    client.sign_out_sync.assert_called_once()
    mock_rerun.assert_called_once()
    assert st.session_state.current_project_id is None
