import threading
import time
import traceback
import logging

from ftclient.config import ClientConfig
from ftclient.core import ClientSession, Request, RequestKind, ScriptedInputSource
from ftclient.errors import ConnectError

import streamlit as st

# Configure logging for Streamlit app
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


st.set_page_config(page_title="ftclient UI", layout="wide")

KIND_LABELS = {
    "List files (-l)": RequestKind.LIST_SHALLOW,
    "List all, including hidden (-la)": RequestKind.LIST_ALL,
    "List with sizes (-ll)": RequestKind.LIST_WITH_SIZE,
    "List recursively (-lr)": RequestKind.LIST_RECURSIVE,
    "Get file (-g)": RequestKind.GET,
}

COLLISION_POLICIES = ["Overwrite", "Save under another name", "Cancel"]

# --- Helpers -----------------------------------------------------------------

# A lightweight wrapper to run blocking network calls in a thread and capture exceptions
def run_in_thread(fn, *args, **kwargs):
    result = {"value": None, "error": None}
    def target():
        try:
            result["value"] = fn(*args, **kwargs)
        except Exception as e:
            result["error"] = e
    t = threading.Thread(target=target)
    t.start()
    return t, result


def collision_answers(policy: str, new_name: str):
    """Pre-recorded answers for the collision prompt."""
    if policy == COLLISION_POLICIES[0]:
        return ["1"]
    if policy == COLLISION_POLICIES[1]:
        return ["2", new_name]
    return ["3"]


# --- UI ----------------------------------------------------------------------
st.title("ftclient")

config = ClientConfig.from_env()

with st.sidebar:
    st.header("Server")
    host = st.text_input("Host", value="localhost")
    control_port = st.number_input("Control port", min_value=1024, max_value=65535, value=30021)
    data_port = st.number_input("Data port", min_value=1024, max_value=65535, value=30020)
    download_dir = st.text_input("Download directory", value=config.download_dir)

if "session" not in st.session_state:
    st.session_state["session"] = ClientSession(config)
session: ClientSession = st.session_state["session"]

col1, col2 = st.columns([3, 1])

with col1:
    st.subheader("Request")
    label = st.selectbox("Command", list(KIND_LABELS))
    kind = KIND_LABELS[label]
    filename = None
    answers = []
    if kind is RequestKind.GET:
        filename = st.text_input("Remote file name")
        policy = st.radio("If the file already exists locally", COLLISION_POLICIES)
        new_name = st.text_input("New name", disabled=policy != COLLISION_POLICIES[1])
        answers = collision_answers(policy, new_name)

    if st.button("Send"):
        logger.info(f"[UI] Send clicked: {kind.token} {filename or ''} -> {host}:{control_port}")
        try:
            request = Request(kind, host, int(control_port), int(data_port), filename or None)
            if request.data_port == request.control_port:
                raise ValueError("That port is already being used as the control port.")
        except ValueError as e:
            st.error(str(e))
        else:
            output = []
            session.config.download_dir = download_dir
            session.input_source = ScriptedInputSource(answers)
            session.echo = output.append
            t, result = run_in_thread(session.make_request, request)
            with st.spinner("Waiting for the server..."):
                while t.is_alive():
                    time.sleep(0.05)

            if output:
                with st.expander("Session output"):
                    st.code("\n".join(output))

            if isinstance(result["error"], ConnectError):
                logger.error(f"[UI] Connection failed: {result['error']}")
                st.error(str(result["error"]))
            elif result["error"] is not None:
                logger.error(f"[UI] Unhandled exception: {result['error']}")
                st.error("Unhandled exception:\n" + "".join(traceback.format_exception(result["error"])))
            else:
                outcome = result["value"]
                logger.info(f"[UI] Request finished: {outcome}")
                if outcome.lines:
                    st.text_area("Response", value="\n".join(outcome.lines), height=300)
                if outcome.is_error:
                    st.error(outcome.message)
                elif outcome.saved_as:
                    st.success(f"{outcome.message} Saved to {outcome.saved_as}")
                else:
                    st.success(outcome.message)

with col2:
    st.subheader("History")
    hist = session.get_history()
    if not hist:
        st.info("No requests yet")
    elif st.button("Clear History"):
        session.clear_history()
        st.rerun()
    for entry in reversed(hist[-100:]):
        time_str = entry["time"].isoformat(timespec="seconds")
        with st.expander(f"{time_str} | {entry['command']} ({entry['status']})"):
            st.write(entry["message"])
            if entry.get("lines"):
                st.code("\n".join(entry["lines"]))
            if entry.get("error"):
                st.error("This entry had an error")


# Footer
st.markdown("---")
st.caption("ftclient Streamlit UI. Each request opens a fresh control connection.")
