"""
Conversion layer for file sharing.
Provides the gateway interface to the external conversion provider and a
poller that drives one provider job to a terminal state under a deadline,
so the sharing service never deals with provider I/O directly.
"""

from .errors import (
    ConversionError,
    ConversionFailed,
    ConversionGatewayError,
    ConversionTimedOut,
    ConversionUnavailable,
)
from .interfaces import ConversionGateway, ConversionJob, ConversionState, infer_file_format
from .poller import ConversionPoller
