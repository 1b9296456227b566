import streamlit as st

from use_cases import bootstrap
from utils import session_manager
from views import login_view

st.set_page_config(page_title="Design Desk", layout="wide")

# --- STARTUP ORCHESTRATION ---
# Storage lives behind the HTTP API; the client only needs config and logging.
bootstrap.run_startup(init_storage=False)

session_manager.init_session_state()

# --- SIGNED IN ---
if st.session_state.current_project_id:
    st.title("Design Desk")
    st.caption(f"Project {st.session_state.current_project_id}")
    if st.button("Sign out", key="logout_btn", type="secondary"):
        session_manager.logout()
    st.stop()

# --- ANONYMOUS WORKSPACE ---
st.title("Design Desk")
tracker = session_manager.SessionStateAnonWorkTracker()
snapshot = tracker.read()
messages = list(snapshot.messages) if snapshot else []

for message in messages:
    with st.chat_message(message["role"]):
        st.write(message["content"])

prompt = st.chat_input("Describe the component you want to build")
if prompt:
    messages.append({"role": "user", "content": prompt})
    tracker.record(messages, snapshot.file_system_data if snapshot else {})
    st.rerun()

with st.sidebar:
    login_view.render_auth_screen()
