"""Progress-streaming gateway for letter generation.

Bridges the generator's progress callback to an async iterator of
``StreamEvent`` objects. The generator runs in a background task that
pushes onto a queue; the consumer side drains the queue and checks whether
the subscriber is still connected between events.

Exactly one terminal event (``complete`` or ``error``) ends every stream
unless the subscriber disconnected first, in which case nothing more is
emitted and the pipeline stops at its next stage boundary.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable, Optional, Union

from lightpoint.core.config import LetterConfig
from lightpoint.core.types import DisconnectProbe
from lightpoint.exceptions import (
    GenerationCancelled,
    GenerationError,
    LightpointError,
)
from lightpoint.letters.generator import ThreeStageLetterGenerator
from lightpoint.models import LetterGenerationSession, LetterRequest, StreamEvent
from lightpoint.streaming.sse import complete_event, error_event, progress_event

log = logging.getLogger(__name__)

_DONE = object()

GeneratorFactory = Callable[[], ThreeStageLetterGenerator]


class ProgressStreamingGateway:
    """Turns one ``LetterRequest`` into a stream of progress/terminal events."""

    def __init__(
        self,
        generator_factory: Union[GeneratorFactory, ThreeStageLetterGenerator],
        config: LetterConfig | None = None,
    ) -> None:
        if isinstance(generator_factory, ThreeStageLetterGenerator):
            generator = generator_factory
            self._factory: GeneratorFactory = lambda: generator
        else:
            self._factory = generator_factory
        self._config = config or LetterConfig()
        # Strong refs so running pipelines are not garbage collected
        self._tasks: set[asyncio.Task] = set()

    async def stream(
        self,
        request: LetterRequest,
        is_disconnected: Optional[DisconnectProbe] = None,
        *,
        session: Optional[LetterGenerationSession] = None,
    ) -> AsyncIterator[StreamEvent]:
        session = session or LetterGenerationSession()
        queue: asyncio.Queue = asyncio.Queue()
        generator = self._factory()

        def on_progress(stage: str, percent: int, message: str) -> None:
            if not session.cancelled:
                queue.put_nowait(progress_event(stage, percent, message))

        async def run() -> None:
            try:
                letter = await generator.generate(
                    request.analysis,
                    request.metadata,
                    on_progress,
                    pipeline=request.resolved_pipeline(),
                    session=session,
                )
            except GenerationCancelled:
                log.info("Session %s stopped after subscriber left", session.session_id)
            except GenerationError as e:
                queue.put_nowait(error_event(str(e), stage=e.stage))
            except LightpointError as e:
                queue.put_nowait(error_event(str(e)))
            except Exception:
                log.exception("Unexpected failure in session %s", session.session_id)
                queue.put_nowait(error_event("Letter generation failed"))
            else:
                queue.put_nowait(
                    complete_event(
                        letter.content,
                        pipeline=letter.pipeline,
                        case_reference=letter.case_reference,
                        session_id=session.session_id,
                    )
                )
            finally:
                queue.put_nowait(_DONE)

        task = asyncio.create_task(run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        try:
            while True:
                try:
                    item = await asyncio.wait_for(
                        queue.get(), timeout=self._config.disconnect_poll_seconds
                    )
                except asyncio.TimeoutError:
                    item = None

                if is_disconnected is not None and await is_disconnected():
                    log.info("Subscriber for session %s disconnected", session.session_id)
                    session.cancel()
                    return
                if item is None:
                    continue
                if item is _DONE:
                    return
                yield item
                if item.terminal:
                    return
        finally:
            if not task.done():
                session.cancel()

    async def drain(self) -> None:
        """Wait for every in-flight pipeline to reach a stage boundary and stop."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
