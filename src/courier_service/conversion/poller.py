import asyncio
import logging
import time
from typing import Awaitable, Callable, TypeVar

from .errors import (
    ConversionFailed,
    ConversionGatewayError,
    ConversionTimedOut,
    ConversionUnavailable,
)
from .interfaces import ConversionGateway, ConversionJob, ConversionState, infer_file_format, normalize_format

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_POLL_INTERVAL_SEC = 0.2
DEFAULT_TIMEOUT_SEC = 5.0


class ConversionPoller:
    """Drives a single conversion job from submission to a terminal state.

    The gateway is blocking, so every call is offloaded to a thread and awaited
    under the time left before the deadline. The clock and the wait primitive
    are injectable so callers can simulate elapsed time. Job state lives only
    in the locals of ``run``; one poller may serve many concurrent requests.
    """

    def __init__(
        self,
        gateway: ConversionGateway,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SEC,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        max_polls: int | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if poll_interval < 0:
            raise ValueError("poll_interval must be >= 0")
        if timeout <= 0:
            raise ValueError("timeout must be > 0")
        if max_polls is not None and max_polls < 0:
            raise ValueError("max_polls must be >= 0")
        self._gateway = gateway
        self._poll_interval = poll_interval
        self._timeout = timeout
        self._max_polls = max_polls
        self._clock = clock
        self._sleep = sleep

    async def run(self, input_file_name: str, target_format: str) -> ConversionJob:
        """Submit a conversion and wait for it to finish.

        Returns the COMPLETED job. Raises ConversionFailed when the provider
        reports ERROR, ConversionTimedOut when the deadline passes first and
        ConversionUnavailable when a gateway call fails.
        """
        if not input_file_name or not target_format:
            raise ValueError("input_file_name and target_format are required")

        input_format = infer_file_format(input_file_name)
        output_format = normalize_format(target_format)
        deadline = self._clock() + self._timeout

        job = await self._call(
            deadline,
            None,
            self._gateway.create_conversion,
            input_file_name,
            input_format,
            output_format,
        )
        logger.info(
            "conversion %s submitted: %s (%s -> %s), state=%s",
            job.id, input_file_name, input_format or "?", output_format, job.state,
        )

        polls = 0
        while not job.is_terminal:
            if self._max_polls is not None and polls >= self._max_polls:
                logger.warning("conversion %s still pending after %d polls", job.id, polls)
                raise ConversionTimedOut(f"conversion {job.id} still pending after {polls} polls", job.id)
            remaining = deadline - self._clock()
            if remaining <= 0:
                raise self._timed_out(job.id)
            await self._sleep(min(self._poll_interval, remaining))
            if self._clock() >= deadline:
                raise self._timed_out(job.id)
            job = await self._call(deadline, job.id, self._gateway.get_conversion_by_id, job.id)
            polls += 1

        if job.state == ConversionState.ERROR:
            logger.warning("conversion %s failed at provider", job.id)
            raise ConversionFailed(f"conversion {job.id} ended in ERROR", job)
        if not job.output_file_name:
            logger.warning("conversion %s completed without an output file", job.id)
            raise ConversionFailed(f"conversion {job.id} completed without an output file", job)

        logger.info("conversion %s completed: %s after %d polls", job.id, job.output_file_name, polls)
        return job

    async def _call(
        self,
        deadline: float,
        conversion_id: str | None,
        fn: Callable[..., T],
        *args: object,
    ) -> T:
        remaining = deadline - self._clock()
        if remaining <= 0:
            raise self._timed_out(conversion_id)
        deadline_scope = asyncio.timeout(remaining)
        try:
            async with deadline_scope:
                return await asyncio.to_thread(fn, *args)
        except (ConversionGatewayError, OSError) as e:
            # TimeoutError is an OSError; only the expired scope means our deadline passed
            if deadline_scope.expired():
                raise self._timed_out(conversion_id) from None
            logger.warning("conversion provider call failed: %s", e)
            raise ConversionUnavailable(str(e) or "conversion provider unavailable") from e

    def _timed_out(self, conversion_id: str | None) -> ConversionTimedOut:
        logger.warning("conversion %s timed out after %.3fs", conversion_id or "<unsubmitted>", self._timeout)
        return ConversionTimedOut(f"conversion {conversion_id} did not finish within {self._timeout}s", conversion_id)
