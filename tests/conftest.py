"""Shared test fixtures: a scripted conversion provider and a controllable clock."""

import asyncio
import itertools

import pytest

from courier_service.conversion import ConversionGatewayError, ConversionJob, ConversionState


def make_job(
    job_id: str,
    state: str,
    input_file_name: str = "document.txt",
    output_file_name: str = "",
    output_file_format: str = "pdf",
) -> ConversionJob:
    completed_at = "2024-05-01T10:00:05Z" if state in ConversionState.TERMINAL else None
    return ConversionJob(
        id=job_id,
        state=state,
        input_file_name=input_file_name,
        input_file_format=input_file_name.rsplit(".", 1)[-1] if "." in input_file_name else "",
        output_file_name=output_file_name,
        output_file_format=output_file_format,
        created_at="2024-05-01T10:00:00Z",
        completed_at=completed_at,
    )


class FakeConversionGateway:
    """Records calls and replays one scripted state sequence per submitted job.

    Each script is a list of states; the first is reported by
    create_conversion, the rest by successive get_conversion_by_id calls (the
    last one repeats). A COMPLETED job gets `<stem>.<output format>` as its
    output file name unless `output_file_name` overrides it.
    """

    def __init__(self, *scripts: list[str], output_file_name: str | None = None) -> None:
        self._scripts = list(scripts)
        self._output_file_name = output_file_name
        self._ids = itertools.count(1)
        self._jobs: dict[str, tuple[list[str], str, str, str]] = {}
        self.create_calls: list[tuple[str, str, str]] = []
        self.get_calls: list[str] = []
        self.create_error: Exception | None = None
        self.get_error: Exception | None = None
        self.on_get = None

    def create_conversion(self, input_file_name: str, input_format: str, output_format: str) -> ConversionJob:
        self.create_calls.append((input_file_name, input_format, output_format))
        if self.create_error is not None:
            raise self.create_error
        job_id = f"job-{next(self._ids)}"
        script = list(self._scripts.pop(0)) if self._scripts else [ConversionState.COMPLETED]
        self._jobs[job_id] = (script, input_file_name, input_format, output_format)
        return self._current(job_id)

    def get_conversion_by_id(self, conversion_id: str) -> ConversionJob:
        self.get_calls.append(conversion_id)
        if self.on_get is not None:
            self.on_get()
        if self.get_error is not None:
            raise self.get_error
        script = self._jobs[conversion_id][0]
        if len(script) > 1:
            script.pop(0)
        return self._current(conversion_id)

    def _current(self, job_id: str) -> ConversionJob:
        script, input_file_name, _, output_format = self._jobs[job_id]
        state = script[0]
        output_name = ""
        if state == ConversionState.COMPLETED:
            stem = input_file_name.rsplit(".", 1)[0]
            output_name = self._output_file_name if self._output_file_name is not None else f"{stem}.{output_format}"
        return make_job(job_id, state, input_file_name, output_name, output_format)


class FakeClock:
    """Monotonic clock that only moves when the poller sleeps (or a test moves it)."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway_error():
    return ConversionGatewayError("provider unreachable")
