from dataclasses import dataclass
from typing import Protocol


class ConversionState:
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"

    TERMINAL = frozenset({COMPLETED, ERROR})
    ALL = frozenset({PENDING, COMPLETED, ERROR})


@dataclass(frozen=True)
class ConversionJob:
    id: str
    state: str
    input_file_name: str
    input_file_format: str
    output_file_name: str = ""
    output_file_format: str = ""
    created_at: str | None = None
    completed_at: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in ConversionState.TERMINAL

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "ConversionJob":
        """Build a job from the provider's camelCase JSON payload."""
        state = str(payload["state"]).upper()
        if state not in ConversionState.ALL:
            raise ValueError(f"unknown conversion state: {payload['state']!r}")
        return cls(
            id=str(payload["id"]),
            state=state,
            input_file_name=str(payload.get("inputFileName") or ""),
            input_file_format=str(payload.get("inputFileFormat") or ""),
            output_file_name=str(payload.get("outputFileName") or ""),
            output_file_format=str(payload.get("outputFileFormat") or ""),
            created_at=payload.get("createdAt"),  # type: ignore[arg-type]
            completed_at=payload.get("completedAt"),  # type: ignore[arg-type]
        )


class ConversionGateway(Protocol):
    def create_conversion(self, input_file_name: str, input_format: str, output_format: str) -> ConversionJob:
        """Submit a conversion job to the provider.
        This is a blocking call; callers should offload to threads if needed.
        """

    def get_conversion_by_id(self, conversion_id: str) -> ConversionJob:
        ...


def infer_file_format(file_name: str) -> str:
    """Return the lowercased extension of ``file_name``, or "" when it has none."""
    base = file_name.rsplit("/", 1)[-1]
    if "." not in base.strip("."):
        return ""
    return base.rsplit(".", 1)[-1].lower()


def normalize_format(fmt: str) -> str:
    return fmt.strip().lstrip(".").lower()
