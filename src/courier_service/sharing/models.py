from dataclasses import dataclass


class ShareMode:
    PUBLIC = "public"
    PRIVATE = "private"

    ALL = frozenset({PUBLIC, PRIVATE})


@dataclass(frozen=True)
class ShareRequest:
    name: str
    mode: str
    convert_to: str | None = None


@dataclass(frozen=True)
class OriginalFile:
    name: str


@dataclass(frozen=True)
class SharedFile:
    id: str
    name: str
    mode: str
    original_file: OriginalFile | None = None

    def to_dict(self) -> dict[str, object]:
        # originalFile is left out entirely when no conversion happened
        body: dict[str, object] = {"id": self.id, "name": self.name, "mode": self.mode}
        if self.original_file is not None:
            body["originalFile"] = {"name": self.original_file.name}
        return body
