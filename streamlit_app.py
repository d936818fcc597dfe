"""
Streamlit entry point for the narrated script generator.

Provides a form that submits a generation request to `ScriptOrchestrator`,
renders the resulting script, and lists the saved library in the sidebar
with view and delete controls.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import streamlit as st
from dotenv import load_dotenv

from scriptgen import GenerationRequest, ScriptOrchestrator, Settings

# Ensure environment variables from .env are loaded before building the pipeline.
load_dotenv()

LOGGER = logging.getLogger(__name__)


@st.cache_resource(show_spinner=False)
def _get_orchestrator() -> ScriptOrchestrator:
    """Create one ScriptOrchestrator per Streamlit process."""
    return ScriptOrchestrator.from_settings(Settings.from_env())


def _init_session_state() -> None:
    """Initialize keys stored in st.session_state."""
    if "last_result" not in st.session_state:
        st.session_state.last_result: Optional[Dict[str, Any]] = None
    if "viewing" not in st.session_state:
        st.session_state.viewing = None


def _render_sidebar(orchestrator: Optional[ScriptOrchestrator], settings: Settings) -> None:
    """Render environment status and the script library."""
    with st.sidebar:
        st.header("Environment")
        for key, is_set in settings.environment_status().items():
            st.markdown(f"{'✅' if is_set else '❌'} `{key}`")
        if not settings.has_search_provider:
            st.caption("No search API configured; research uses mock results.")

        st.divider()
        st.header("Library")
        if orchestrator is None:
            st.caption("Library unavailable until the generator is configured.")
            return

        records = orchestrator.library.list()
        if not records:
            st.caption("No scripts generated yet.")
            return
        for record in records:
            with st.expander(record.title, expanded=False):
                st.caption(f"{record.generated_at:%Y-%m-%d %H:%M} · {record.word_count} words")
                st.code(record.filename, language=None)
                view_col, delete_col = st.columns(2)
                if view_col.button("View", key=f"view-{record.filename}", use_container_width=True):
                    st.session_state.viewing = record.filename
                    st.rerun()
                if delete_col.button("Delete", key=f"delete-{record.filename}", use_container_width=True):
                    orchestrator.library.delete(record.filename)
                    if st.session_state.viewing == record.filename:
                        st.session_state.viewing = None
                    st.rerun()


def _render_result(result: Dict[str, Any]) -> None:
    if result.get("success"):
        st.success(f"Script generated: {result.get('wordCount')} words.")
    elif result.get("content"):
        st.warning(result.get("warning") or "Script generated with validation issues.")
    else:
        st.error(result.get("error") or "Script generation failed.")
        return

    details = [f"File: `{result.get('filePath')}`", f"Attempts: {result.get('attempts')}"]
    if result.get("researchSourceCount") is not None:
        details.append(f"Research sources: {result['researchSourceCount']}")
    st.caption(" · ".join(details))
    st.text_area("Script", result.get("content", ""), height=480)
    if result.get("filePath"):
        st.download_button(
            "Download script",
            data=result.get("content", ""),
            file_name=result["filePath"].replace("\\", "/").rsplit("/", 1)[-1],
            mime="text/plain",
        )


def main() -> None:
    st.set_page_config(page_title="Script Generator", layout="wide")

    st.title("Script Generator")
    st.caption("Enter a video title and the generator will research the topic and draft a narrated script.")

    _init_session_state()
    settings = Settings.from_env()

    orchestrator: Optional[ScriptOrchestrator]
    try:
        orchestrator = _get_orchestrator()
    except Exception as exc:  # pragma: no cover - defensive guard for UI
        LOGGER.exception("Streamlit failed to initialize ScriptOrchestrator: %s", exc)
        st.error(
            "Failed to initialize the script generator. "
            "Verify API keys in your environment and restart the app.\n\n"
            f"Details: {exc}"
        )
        orchestrator = None

    if orchestrator is None:
        _render_sidebar(None, settings)
        return

    with st.form("generate"):
        title = st.text_input("Video title", placeholder="Every Fighter Jet Generation Explained")
        words_col, retries_col = st.columns(2)
        target_words = words_col.number_input("Target words", min_value=100, max_value=5000, value=1250, step=50)
        max_retries = retries_col.selectbox("Max attempts", options=[1, 2, 3, 4, 5], index=1)
        enable_research = st.checkbox("Research the topic first", value=True)
        submitted = st.form_submit_button("Generate", use_container_width=True)

    if submitted:
        if not title.strip():
            st.error("Title is required.")
        else:
            request = GenerationRequest(
                title=title,
                enable_research=enable_research,
                target_word_count=int(target_words),
                max_retries=int(max_retries),
            )
            with st.spinner("Researching and writing your script..."):
                try:
                    result = orchestrator.generate(request)
                    st.session_state.last_result = result.to_payload()
                except Exception as exc:  # pragma: no cover - surfaced to UI
                    LOGGER.exception("Script generation failed: %s", exc)
                    st.session_state.last_result = {"success": False, "error": str(exc)}
            st.session_state.viewing = None

    if st.session_state.viewing:
        filename = st.session_state.viewing
        st.subheader(filename)
        try:
            st.text_area("Saved script", orchestrator.library.read(filename), height=480)
        except Exception as exc:  # pragma: no cover - surfaced to UI
            st.error(f"Unable to open {filename}: {exc}")
    elif st.session_state.last_result:
        _render_result(st.session_state.last_result)

    _render_sidebar(orchestrator, settings)


if __name__ == "__main__":
    main()
