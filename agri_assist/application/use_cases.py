import asyncio
import logging
from typing import Callable, List, Optional, Sequence, Tuple

from agri_assist.application.cascade import FallbackCascade, Tier
from agri_assist.application.conversation import (
    AGRI_SYSTEM_PROMPT,
    MODEL_LOADING_NOTICE,
    build_enrichment_request,
)
from agri_assist.application.errors import (
    InvalidRequestError,
    NoUsableResult,
    ServiceNotConfiguredError,
)
from agri_assist.application.narrative import build_diagnosis_narrative
from agri_assist.application.ports import (
    ImageClassifierPort,
    ResponderPort,
    TextGeneratorPort,
    TranscriberPort,
)
from agri_assist.application.schemas import (
    ChatReply,
    DiagnosisReport,
    DiagnosisSummary,
    TranscriptionResult,
)
from agri_assist.application.validators import (
    DEFAULT_MAX_AUDIO_MB,
    DEFAULT_MAX_FILES,
    DEFAULT_MAX_IMAGE_MB,
    validate_asset_count,
    validate_audio_type,
    validate_file_size,
    validate_image_type,
)
from agri_assist.domain.diagnosis import build_diagnosis, failed_diagnosis
from agri_assist.domain.models import ClassificationResult, DiagnosisResult, UploadedAsset


logger = logging.getLogger(__name__)


def _raise_if_invalid(check: Tuple[bool, str], code: str) -> None:
    valid, message = check
    if not valid:
        raise InvalidRequestError(message, code=code)


class CropDiagnosisUseCase:
    """Classifies every uploaded image concurrently and builds one report.

    A failing image never fails the request: it is replaced by a sentinel
    diagnosis and the report is assembled in upload order.
    """

    def __init__(
        self,
        classifiers: Sequence[ImageClassifierPort],
        load_image: Callable[[str], bytes],
        max_files: int = DEFAULT_MAX_FILES,
        max_file_size_mb: int = DEFAULT_MAX_IMAGE_MB,
    ):
        self.cascade: FallbackCascade[List[ClassificationResult]] = FallbackCascade(
            [Tier(c.model, c.classify) for c in classifiers],
            purpose="image classification",
        )
        self.load_image = load_image
        self.max_files = max_files
        self.max_file_size_mb = max_file_size_mb

    def validate(self, assets: Sequence[UploadedAsset]) -> None:
        _raise_if_invalid(
            validate_asset_count(assets, self.max_files),
            "NO_IMAGES" if not assets else "TOO_MANY_FILES",
        )
        for asset in assets:
            _raise_if_invalid(validate_image_type(asset), "INVALID_FILE_TYPE")
            _raise_if_invalid(validate_file_size(asset.size_bytes, self.max_file_size_mb), "FILE_TOO_LARGE")

    async def diagnose(
        self,
        assets: Sequence[UploadedAsset],
        user_context: str = "",
        timeout: Optional[float] = None,
    ) -> DiagnosisReport:
        self.validate(assets)
        logger.info("Diagnosing %d image(s)", len(assets))

        diagnoses = await self.classify_all(assets, timeout=timeout)
        narrative = build_diagnosis_narrative(diagnoses, user_context)

        return DiagnosisReport(
            narrative=narrative,
            diagnoses=[DiagnosisSummary.from_diagnosis(a.name, d) for a, d in zip(assets, diagnoses)],
        )

    async def classify_all(
        self,
        assets: Sequence[UploadedAsset],
        timeout: Optional[float] = None,
    ) -> List[DiagnosisResult]:
        """
        Run one pipeline per asset and return results in submission order.

        All pipelines start together; image preprocessing runs in worker threads
        so it never blocks the event loop. validate() caps the asset count.

        With a timeout, images still in flight when it expires are cancelled and
        reported as sentinels; finished ones are kept.
        """
        if not assets:
            return []

        if timeout is None:
            return list(await asyncio.gather(*(self._classify_one(a) for a in assets)))

        tasks = [asyncio.ensure_future(self._classify_one(a)) for a in assets]
        done, pending = await asyncio.wait(tasks, timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        results: List[DiagnosisResult] = []
        for asset, task in zip(assets, tasks):
            if task in done:
                results.append(task.result())
            else:
                logger.warning("Classification of %s did not finish within %.1fs", asset.name, timeout)
                results.append(failed_diagnosis(asset.name, reason="Analysis timed out for image"))
        return results

    async def _classify_one(self, asset: UploadedAsset) -> DiagnosisResult:
        try:
            image = await asyncio.to_thread(self.load_image, asset.path)
            results = await self.cascade.run(image)
            diagnosis = build_diagnosis(results)
        except Exception as e:
            logger.error("Failed to classify %s: %s", asset.name, e)
            return failed_diagnosis(asset.name)

        logger.debug(
            "Top label for %s: %r -> subject=%r condition=%r",
            asset.name, diagnosis.top_prediction, diagnosis.subject_name, diagnosis.condition_name,
        )
        return diagnosis


class ChatUseCase:
    """Answers farmer questions through the generation tiers.

    When every remote tier is exhausted the local responder answers instead,
    so a chat request never fails for lack of a model.
    """

    def __init__(
        self,
        generators: Sequence[TextGeneratorPort],
        responder: ResponderPort,
        diagnosis: Optional[CropDiagnosisUseCase] = None,
        system_prompt: str = AGRI_SYSTEM_PROMPT,
    ):
        self.cascade: FallbackCascade[str] = FallbackCascade(
            [Tier(g.model, g.generate) for g in generators],
            purpose="chat generation",
        )
        self.responder = responder
        self.diagnosis = diagnosis
        self.system_prompt = system_prompt

    async def chat(self, message: str, assets: Sequence[UploadedAsset] = ()) -> ChatReply:
        message = message or ""
        if not message.strip() and not assets:
            raise InvalidRequestError("Message or images required", code="EMPTY_REQUEST")

        logger.info("Chat | images: %d | msg: %r", len(assets), message[:60])

        if assets:
            return await self._chat_with_images(message, assets)

        try:
            reply = await self.cascade.run(message, self.system_prompt)
        except NoUsableResult as e:
            logger.warning("Chat models unavailable (%s), using rule-based reply", e.code)
            reply = self.responder.respond(message)
            if e.all_transient:
                reply = MODEL_LOADING_NOTICE + reply
            return ChatReply(narrative=reply, used_fallback=True)

        return ChatReply(narrative=reply)

    async def _chat_with_images(self, message: str, assets: Sequence[UploadedAsset]) -> ChatReply:
        if self.diagnosis is None:
            raise ServiceNotConfiguredError("Image diagnosis is not configured", service="diagnosis")

        report = await self.diagnosis.diagnose(assets, message)

        try:
            reply = await self.cascade.run(build_enrichment_request(report.narrative), self.system_prompt)
        except NoUsableResult as e:
            logger.warning("Chat models unavailable for enrichment (%s), using base narrative", e.code)
            return ChatReply(narrative=report.narrative, diagnoses=report.diagnoses, used_fallback=True)

        return ChatReply(narrative=reply, diagnoses=report.diagnoses)


class TranscriptionUseCase:
    DEFAULT_MIME_TYPE = "audio/webm"

    def __init__(self, transcribers: Sequence[TranscriberPort], max_audio_size_mb: int = DEFAULT_MAX_AUDIO_MB):
        self.cascade: FallbackCascade[str] = FallbackCascade(
            [Tier(t.model, t.transcribe) for t in transcribers],
            purpose="speech-to-text",
        )
        self.max_audio_size_mb = max_audio_size_mb

    async def transcribe(self, audio: bytes, mime_type: Optional[str] = None) -> TranscriptionResult:
        """
        Convert a voice recording to text.

        Raises:
            ServiceNotConfiguredError: no speech model is configured
            InvalidRequestError: empty, oversize or non-audio payload
            NoUsableResult: every speech model failed or is loading
        """
        if not self.cascade.tiers:
            raise ServiceNotConfiguredError(
                "Speech-to-text not configured. Set HF_API_TOKEN.", service="transcription"
            )
        if not audio:
            raise InvalidRequestError("Audio file is required", code="NO_AUDIO")

        mime_type = mime_type or self.DEFAULT_MIME_TYPE
        _raise_if_invalid(validate_audio_type(mime_type), "INVALID_FILE_TYPE")
        _raise_if_invalid(validate_file_size(len(audio), self.max_audio_size_mb), "FILE_TOO_LARGE")

        logger.info("STT request: %.1f KB (%s)", len(audio) / 1024, mime_type)
        text = await self.cascade.run(audio, mime_type)
        logger.info("Transcription complete: %r", text[:100])
        return TranscriptionResult(text=text)
