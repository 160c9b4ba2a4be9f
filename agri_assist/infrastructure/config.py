import os
import logging

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except Exception:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception:
            pass
    # Fallback to environment variables
    return os.environ.get(name, default)


def _get_int(name: str, default: int) -> int:
    raw = get_secret(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


class Settings:
    @property
    def hf_api_token(self) -> str | None:
        token = get_secret("HF_API_TOKEN")
        return token.strip() if token and token.strip() else None

    @property
    def plant_disease_model(self) -> str:
        return get_secret(
            "HF_PLANT_DISEASE_MODEL", "linkanjarad/mobilenet_v2_1.0_224-plant-disease-identification"
        ) or "linkanjarad/mobilenet_v2_1.0_224-plant-disease-identification"

    @property
    def stt_primary_model(self) -> str:
        return get_secret("HF_STT_PRIMARY_MODEL", "ihanif/whisper-medium-urdu") or "ihanif/whisper-medium-urdu"

    @property
    def stt_fallback_model(self) -> str:
        return get_secret("HF_STT_FALLBACK_MODEL", "openai/whisper-large-v3") or "openai/whisper-large-v3"

    @property
    def chat_model(self) -> str:
        return get_secret("HF_CHAT_MODEL", "enstazao/Qalb-1.0-8B-Instruct") or "enstazao/Qalb-1.0-8B-Instruct"

    @property
    def hf_timeout_seconds(self) -> int:
        return _get_int("HF_TIMEOUT_SECONDS", 60)

    @property
    def mistral_api_key(self) -> str | None:
        return get_secret("MISTRAL_API_KEY")

    @property
    def mistral_model(self) -> str:
        return get_secret("MISTRAL_MODEL", "mistral-large-latest") or "mistral-large-latest"

    @property
    def max_files_per_request(self) -> int:
        return _get_int("MAX_FILES_PER_REQUEST", 5)

    @property
    def max_file_size_mb(self) -> int:
        return _get_int("MAX_FILE_SIZE_MB", 10)

    @property
    def max_audio_size_mb(self) -> int:
        return _get_int("MAX_AUDIO_SIZE_MB", 25)

    @property
    def log_level(self) -> str:
        return (get_secret("LOG_LEVEL", "INFO") or "INFO").upper()
