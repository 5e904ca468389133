import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from courier_service import __version__
from courier_service.config import Settings, configure_logging, load_settings
from courier_service.conversion import ConversionGateway, ConversionPoller
from courier_service.conversion.adapters import HttpConversionGateway
from courier_service.sharing import ShareConversionError, ShareOrchestrator, ShareRequest, ShareValidationError
from courier_service.shipping import (
    CityNotFound,
    LocationClient,
    LocationUnavailable,
    ShippingQuoter,
    ShippingValidationError,
)

logger = logging.getLogger(__name__)


class ShareFileQuery(BaseModel):
    """Body of POST /shares/files. Semantic checks belong to ShareOrchestrator."""

    model_config = {"populate_by_name": True}

    name: str = ""
    mode: str = ""
    convert_to: str | None = Field(default=None, alias="convertTo")


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def create_app(
    settings: Settings | None = None,
    *,
    conversion_gateway: ConversionGateway | None = None,
    location_client: LocationClient | None = None,
) -> FastAPI:
    """Build the application and wire its collaborators explicitly.

    Gateways not passed in are built from settings and closed on shutdown;
    injected ones belong to the caller.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    owned: list[HttpConversionGateway | LocationClient] = []
    if conversion_gateway is None:
        conversion_gateway = HttpConversionGateway(settings.conversion_api_url, timeout=settings.http_timeout_sec)
        owned.append(conversion_gateway)
    if location_client is None:
        location_client = LocationClient(settings.location_api_url, timeout=settings.http_timeout_sec)
        owned.append(location_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        for client in owned:
            client.close()

    app = FastAPI(
        title="Courier Service",
        version=os.getenv("COURIER_SERVICE_VERSION", __version__),
        description=(
            "RESTful API for sharing files, optionally converted to another "
            "format, and for quoting shipping costs between cities."
        ),
        lifespan=lifespan,
    )

    poller = ConversionPoller(
        conversion_gateway,
        poll_interval=settings.conversion_poll_interval_sec,
        timeout=settings.conversion_timeout_sec,
        max_polls=settings.conversion_max_polls,
    )
    app.state.shares = ShareOrchestrator(poller)
    app.state.shipping = ShippingQuoter(
        location_client,
        base_fee_cents=settings.shipping_base_fee_cents,
        rate_per_km_kg_cents=settings.shipping_rate_per_km_kg_cents,
    )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return _message(status.HTTP_400_BAD_REQUEST, "Validation error")

    @app.get("/health")
    def health() -> dict[str, str]:
        """Basic health check endpoint."""
        return {"status": "ok"}

    @app.post("/shares/files")
    async def share_file(query: ShareFileQuery, request: Request) -> JSONResponse:
        """Share a file, converting it first when `convertTo` names another format.

        Returns 200 with the shared-file record, 400 on invalid input and 500
        when the conversion could not be completed.
        """
        orchestrator: ShareOrchestrator = request.app.state.shares
        share_request = ShareRequest(name=query.name, mode=query.mode, convert_to=query.convert_to)
        try:
            shared = await orchestrator.share(share_request)
        except ShareValidationError as e:
            return _message(status.HTTP_400_BAD_REQUEST, str(e))
        except ShareConversionError as e:
            return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
        return JSONResponse(content=shared.to_dict())

    @app.get("/shipping/calculate")
    async def calculate_shipping(
        request: Request,
        origin_city_name: str = Query("", alias="originCityName"),
        destination_city_name: str = Query("", alias="destinationCityName"),
        weight_in_kilograms: float = Query(0, alias="weightInKilograms"),
        volume_in_liters: float = Query(0, alias="volumeInLiters"),
    ) -> JSONResponse:
        quoter: ShippingQuoter = request.app.state.shipping
        try:
            quote = await quoter.quote(origin_city_name, destination_city_name, weight_in_kilograms, volume_in_liters)
        except ShippingValidationError as e:
            return _message(status.HTTP_400_BAD_REQUEST, str(e))
        except (CityNotFound, LocationUnavailable) as e:
            logger.warning("location lookup failed: %s: %s", type(e).__name__, e)
            return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, LocationUnavailable.message)
        return JSONResponse(content=quote.to_dict())

    return app


def run() -> None:
    """Run a development ASGI server using uvicorn.

    Exposes the app at host:port (default 0.0.0.0:8080). Set PORT env var to override.
    """
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8080"))
    # Enable reload in dev unless explicitly disabled
    reload = os.getenv("RELOAD", "true").lower() in {"1", "true", "yes", "on"}

    uvicorn.run("courier_service.webapi:create_app", factory=True, host=host, port=port, reload=reload)


if __name__ == "__main__":
    run()
