import re
from configparser import ConfigParser
from typing import List, Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from kivy.logger import Logger as logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import load_config, split_list
from ..core.services import CounterService
from ..errors import ConfigError
from .schemas import CounterSchema, ErrorBody

GREETING = "Hello, world!"

# RFC 7230 token
_HEADER_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def validate_header_names(names: List[str]) -> List[str]:
    for name in names:
        if not _HEADER_NAME.match(name):
            raise ConfigError(f"invalid header name: {name!r}")
    return [name.lower() for name in names]


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        ErrorBody(error=message).model_dump(), status_code=status_code, headers=headers
    )


def get_counter_service(request: Request) -> CounterService:
    return request.app.state.counter_service


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        # integer parts are list indexes or JSON decode offsets
        loc = ".".join(
            str(p) for p in err.get("loc", ()) if p != "body" and not isinstance(p, int)
        )
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request"


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation_error(exc)
    status_code = 400 if any(e.get("type") == "json_invalid" for e in exc.errors()) else 422
    logger.info("CounterServer: Rejected %s %s: %s", request.method, request.url.path, message)
    return error_response(status_code, message)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("CounterServer: Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, str(exc) or exc.__class__.__name__)


def create_app(
    config: Optional[ConfigParser] = None,
    service: Optional[CounterService] = None,
) -> FastAPI:
    """
    Build the counter API. Raises ConfigError if the CORS settings are invalid.
    """
    if config is None:
        config = load_config()

    allow_headers = validate_header_names(split_list(config.get("cors", "allow_headers")))
    allow_methods = [m.upper() for m in split_list(config.get("cors", "allow_methods"))]
    allow_origins = split_list(config.get("cors", "allow_origins"))

    app = FastAPI(title="Shared Counter", version="0.1.0")
    app.state.counter_service = service if service is not None else CounterService()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=allow_methods,
        allow_headers=allow_headers,
    )
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.get("/", response_class=PlainTextResponse)
    def hello() -> str:
        return GREETING

    @app.get("/counter", response_model=CounterSchema)
    def get_counter(service: CounterService = Depends(get_counter_service)) -> CounterSchema:
        return CounterSchema.from_counter(service.next_value())

    @app.put("/counter", status_code=204, response_class=Response)
    def set_counter(
        counter: CounterSchema,
        service: CounterService = Depends(get_counter_service),
    ) -> Response:
        service.set_value(counter.number)
        logger.debug("CounterServer: Counter set to %d", counter.number)
        return Response(status_code=204)

    return app
