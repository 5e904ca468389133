from .errors import ShareConversionError, ShareError, ShareValidationError
from .models import OriginalFile, ShareMode, ShareRequest, SharedFile
from .service import ShareOrchestrator
