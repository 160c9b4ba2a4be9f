import logging
from dataclasses import dataclass
from typing import List

from agri_assist.application.conversation import RuleBasedAgriResponder
from agri_assist.application.ports import ImageClassifierPort, TextGeneratorPort, TranscriberPort
from agri_assist.application.use_cases import ChatUseCase, CropDiagnosisUseCase, TranscriptionUseCase
from agri_assist.infrastructure.config import Settings
from agri_assist.infrastructure.huggingface.client import (
    HuggingFaceImageClassifier,
    HuggingFaceInferenceClient,
    HuggingFaceTextGenerator,
    HuggingFaceTranscriber,
)
from agri_assist.infrastructure.imaging import prepare_image
from agri_assist.infrastructure.llm.mistral_client import MistralTextGenerator


logger = logging.getLogger(__name__)


@dataclass
class Services:
    diagnosis: CropDiagnosisUseCase
    chat: ChatUseCase
    transcription: TranscriptionUseCase


def build_services(settings: Settings | None = None) -> Services:
    """Wire the use cases to the model tiers enabled by the settings.

    Without an HF token no remote tier is configured: images come back as
    sentinels, chat answers from the local responder and transcription raises
    ServiceNotConfiguredError.
    """
    settings = settings or Settings()

    classifiers: List[ImageClassifierPort] = []
    transcribers: List[TranscriberPort] = []
    generators: List[TextGeneratorPort] = []

    token = settings.hf_api_token
    if token:
        hf = HuggingFaceInferenceClient(token, timeout=settings.hf_timeout_seconds)
        classifiers.append(HuggingFaceImageClassifier(hf, settings.plant_disease_model))
        transcribers.append(HuggingFaceTranscriber(hf, settings.stt_primary_model))
        transcribers.append(HuggingFaceTranscriber(hf, settings.stt_fallback_model))
        generators.append(HuggingFaceTextGenerator(hf, settings.chat_model))
    else:
        logger.warning("HF_API_TOKEN is not set; remote models are disabled.")

    if settings.mistral_api_key:
        generators.append(MistralTextGenerator(settings.mistral_api_key, settings.mistral_model))

    diagnosis = CropDiagnosisUseCase(
        classifiers,
        load_image=prepare_image,
        max_files=settings.max_files_per_request,
        max_file_size_mb=settings.max_file_size_mb,
    )
    return Services(
        diagnosis=diagnosis,
        chat=ChatUseCase(generators, RuleBasedAgriResponder(), diagnosis=diagnosis),
        transcription=TranscriptionUseCase(transcribers, max_audio_size_mb=settings.max_audio_size_mb),
    )
