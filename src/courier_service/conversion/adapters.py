import requests

from .errors import ConversionGatewayError
from .interfaces import ConversionGateway, ConversionJob


class HttpConversionGateway(ConversionGateway):
    """JSON-over-HTTP client for the external conversion provider."""

    def __init__(self, base_url: str, *, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self._base = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def create_conversion(self, input_file_name: str, input_format: str, output_format: str) -> ConversionJob:
        body = {
            "inputFileName": input_file_name,
            "inputFileFormat": input_format,
            "outputFileFormat": output_format,
        }
        return self._request("POST", "/conversions", json=body)

    def get_conversion_by_id(self, conversion_id: str) -> ConversionJob:
        if not conversion_id:
            raise ValueError("conversion_id is required")
        return self._request("GET", f"/conversions/{conversion_id}")

    def close(self) -> None:
        self._session.close()

    def _request(self, method: str, path: str, **kwargs: object) -> ConversionJob:
        try:
            resp = self._session.request(method, f"{self._base}{path}", timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise ConversionGatewayError(f"{method} {path} failed: {e}") from e
        if resp.status_code >= 400:
            raise ConversionGatewayError(f"{method} {path} returned {resp.status_code}: {resp.text[:200]}")
        try:
            payload = resp.json()
            return ConversionJob.from_payload(payload)
        except (ValueError, KeyError, TypeError) as e:
            raise ConversionGatewayError(f"{method} {path} returned a malformed job: {e}") from e
