import logging
import uuid
from typing import Callable

from ..conversion import ConversionError, ConversionPoller, infer_file_format
from ..conversion.interfaces import normalize_format
from .errors import ShareConversionError, ShareValidationError
from .models import OriginalFile, ShareMode, ShareRequest, SharedFile

logger = logging.getLogger(__name__)


def _new_share_id() -> str:
    return str(uuid.uuid4())


class ShareOrchestrator:
    """Turns a share request into a shared-file record.

    Conversion runs only when the request asks for a format different from
    the one inferred from the file name. Every call mints a new id; nothing
    is deduplicated or cached between calls.
    """

    def __init__(self, poller: ConversionPoller, *, id_factory: Callable[[], str] = _new_share_id) -> None:
        self._poller = poller
        self._id_factory = id_factory

    async def share(self, request: ShareRequest) -> SharedFile:
        self._validate(request)

        target = normalize_format(request.convert_to or "")
        if not target or target == infer_file_format(request.name):
            shared = SharedFile(id=self._id_factory(), name=request.name, mode=request.mode)
            logger.info("shared %s as %s (%s, no conversion)", request.name, shared.id, shared.mode)
            return shared

        try:
            job = await self._poller.run(request.name, target)
        except ConversionError as e:
            logger.warning("could not convert %s to %s: %s: %s", request.name, target, type(e).__name__, e)
            raise ShareConversionError() from e

        shared = SharedFile(
            id=self._id_factory(),
            name=job.output_file_name,
            mode=request.mode,
            original_file=OriginalFile(name=request.name),
        )
        logger.info("shared %s as %s (%s, converted from %s)", shared.name, shared.id, shared.mode, request.name)
        return shared

    @staticmethod
    def _validate(request: ShareRequest) -> None:
        if not isinstance(request.name, str) or not request.name.strip():
            raise ShareValidationError()
        if request.mode not in ShareMode.ALL:
            raise ShareValidationError()
