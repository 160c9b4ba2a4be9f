import asyncio
import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import List, Sequence

import streamlit as st

from agri_assist.application.errors import AgriAssistError
from agri_assist.application.schemas import DiagnosisSummary
from agri_assist.domain.models import UploadedAsset
from agri_assist.infrastructure.config import Settings
from agri_assist.infrastructure.container import Services, build_services


logger = logging.getLogger(__name__)


DISCLAIMER = (
    "🌾 **DISCLAIMER:** Diagnoses and treatments are AI-generated and may be wrong. "
    "Confirm with a local agronomist or extension officer before applying any treatment."
)


def _persist_uploads(uploaded_files: Sequence, directory: str) -> List[UploadedAsset]:
    """Write Streamlit uploads to disk so the core can read them by path."""
    assets: List[UploadedAsset] = []
    for uploaded in uploaded_files:
        suffix = Path(uploaded.name).suffix.lower()
        path = Path(directory) / f"{uuid.uuid4()}{suffix}"
        data = uploaded.getvalue()
        path.write_bytes(data)
        assets.append(
            UploadedAsset(
                path=str(path),
                name=uploaded.name,
                mime_type=uploaded.type,
                size_bytes=len(data),
            )
        )
    return assets


def _format_summaries(summaries: Sequence[DiagnosisSummary]) -> List[dict]:
    return [
        {
            "image": s.name,
            "plant": s.subject_name or "—",
            "condition": "healthy" if s.is_healthy else (s.condition_name or "—"),
            "confidence": f"{s.confidence * 100:.1f}%",
            "severity": s.severity.display,
        }
        for s in summaries
    ]


def _render_error(e: AgriAssistError) -> None:
    if e.code == "MODEL_LOADING":
        st.warning(f"⏳ {e.message}")
    else:
        st.error(f"❌ **{e.code}:** {e.message}")


def _render_sidebar(settings: Settings):
    st.sidebar.title("⚙️ Settings")

    st.sidebar.markdown("### Models")
    st.sidebar.caption(f"**Plant disease:** {settings.plant_disease_model}")
    st.sidebar.caption(f"**Speech:** {settings.stt_primary_model} → {settings.stt_fallback_model}")
    st.sidebar.caption(f"**Chat:** {settings.chat_model}")

    if settings.hf_api_token:
        st.sidebar.success("✓ Hugging Face token configured")
    else:
        st.sidebar.warning("⚠️ HF_API_TOKEN missing, using offline replies")

    if settings.mistral_api_key:
        st.sidebar.success(f"✓ Mistral fallback: {settings.mistral_model}")


def _diagnose_tab(services: Services):
    uploads = st.file_uploader(
        "Crop photos", type=["jpg", "jpeg", "png", "webp", "gif"], accept_multiple_files=True
    )
    note = st.text_input("Describe what you see (optional)")

    if st.button("🔬 Analyse", disabled=not uploads):
        with tempfile.TemporaryDirectory() as tmp, st.spinner("Analysing your crop..."):
            try:
                assets = _persist_uploads(uploads, tmp)
                report = asyncio.run(services.diagnosis.diagnose(assets, note))
            except AgriAssistError as e:
                _render_error(e)
                return
        st.markdown(report.narrative)
        st.dataframe(_format_summaries(report.diagnoses), use_container_width=True)


def _chat_tab(services: Services):
    if "chat_messages" not in st.session_state:
        st.session_state.chat_messages = []

    for msg in st.session_state.chat_messages:
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])

    user_input = st.chat_input("Ask about your crops...")
    if user_input:
        st.session_state.chat_messages.append({"role": "user", "content": user_input})
        with st.spinner("⏳ Thinking..."):
            try:
                reply = asyncio.run(services.chat.chat(user_input)).narrative
            except AgriAssistError as e:
                logger.exception("Chat failed: %s", e)
                reply = f"❌ **Error:** {e.message}"
        st.session_state.chat_messages.append({"role": "assistant", "content": reply})
        st.rerun()


def _voice_tab(services: Services):
    recording = st.file_uploader("Voice note", type=["webm", "wav", "mp3", "m4a", "ogg", "mp4"])
    if recording is not None and st.button("📝 Transcribe"):
        with st.spinner("Transcribing..."):
            try:
                result = asyncio.run(
                    services.transcription.transcribe(recording.getvalue(), recording.type)
                )
            except AgriAssistError as e:
                _render_error(e)
                return
        st.text_area("Transcript", result.text)


def main():
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

    st.set_page_config(
        page_title="Agri Assist",
        page_icon="🌿",
        layout="centered",
        initial_sidebar_state="expanded",
    )

    settings = Settings()
    services = build_services(settings)
    _render_sidebar(settings)

    st.markdown("# 🌿 Agri Assist")
    st.info(DISCLAIMER)

    diagnose, chat, voice = st.tabs(["Diagnose", "Chat", "Voice"])
    with diagnose:
        _diagnose_tab(services)
    with chat:
        _chat_tab(services)
    with voice:
        _voice_tab(services)


if __name__ == "__main__":
    main()
