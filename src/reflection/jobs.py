"""Background lifecycle of a personality reflection: pending -> processing -> completed | failed."""

import asyncio
from pathlib import Path

import structlog

from cli.config_models import ReflectionConfig
from jobs import JobCoordinator, job_coordinator
from llm import LLMProvider, LLMRateLimitError
from shared_types import ReflectionTier

from . import store
from .models import PersonalityReflection
from .synthesizer import ReflectionSynthesizer

logger = structlog.get_logger()

JOB_TYPE = "personality-reflection"

INSUFFICIENT_DATA_MESSAGE = (
    "Not enough data for comprehensive analysis. "
    "Continue journaling, chatting, and tracking moods to build your profile."
)
QUOTA_MESSAGE = "OpenAI API quota exceeded. Please check your OpenAI account billing and usage limits."
BUSY_MESSAGE = "A previous reflection is still finishing. Please try again in a moment."


def failure_message(error: BaseException) -> str:
    text = str(error)
    if isinstance(error, LLMRateLimitError) or "429" in text or "quota" in text.lower():
        return QUOTA_MESSAGE
    return text or type(error).__name__


async def process_personality_reflection(
    reflection_id: str,
    user_id: str,
    tier: ReflectionTier | str,
    provider: LLMProvider | None,
    config: ReflectionConfig | None = None,
    db_path: Path | None = None,
) -> None:
    """Run synthesis for one reflection record and write the outcome back.

    Never raises for synthesis errors; they end up in ``error_message``.
    Cancellation marks the record failed and propagates.
    """
    log = logger.bind(reflection_id=reflection_id, user_id=user_id)
    synthesizer = ReflectionSynthesizer(provider, config=config, db_path=db_path)

    def on_progress(progress: int, label: str) -> None:
        store.update_progress(reflection_id, progress, label, db_path=db_path)

    try:
        if not await asyncio.to_thread(store.mark_processing, reflection_id, db_path):
            log.warning("reflection.not_pending")
            return
        profile = await asyncio.to_thread(synthesizer.synthesize, user_id, tier, on_progress)
        if profile is None:
            await asyncio.to_thread(store.fail_reflection, reflection_id, INSUFFICIENT_DATA_MESSAGE, db_path)
            log.info("reflection.failed_insufficient_data")
            return
        if await asyncio.to_thread(store.complete_reflection, reflection_id, profile, db_path):
            log.info("reflection.completed")
    except asyncio.CancelledError:
        store.fail_reflection(reflection_id, store.INTERRUPTED_MESSAGE, db_path=db_path)
        log.warning("reflection.interrupted")
        raise
    except Exception as e:
        log.error("reflection.failed", error=str(e), error_type=type(e).__name__)
        await asyncio.to_thread(store.fail_reflection, reflection_id, failure_message(e), db_path)


def start_reflection(
    user_id: str,
    tier: ReflectionTier | str,
    provider: LLMProvider | None,
    config: ReflectionConfig | None = None,
    db_path: Path | None = None,
    coordinator: JobCoordinator = job_coordinator,
) -> PersonalityReflection:
    """Return the user's active reflection, or create one and queue its processing.

    Must be called from inside a running event loop.
    """
    tier = ReflectionTier(tier)
    active = store.get_active_reflection(user_id, db_path=db_path)
    if active is not None:
        return active

    reflection, created = store.create_reflection(user_id, tier, db_path=db_path)
    if created:
        task = coordinator.run(
            JOB_TYPE,
            user_id,
            lambda: process_personality_reflection(reflection.id, user_id, tier, provider, config, db_path),
        )
        if task is None:
            # the previous job still holds the key; nothing would ever process this record
            store.fail_reflection(reflection.id, BUSY_MESSAGE, db_path=db_path)
            reflection = store.get_reflection(reflection.id, db_path=db_path)
    return reflection
