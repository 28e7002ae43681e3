import logging
from typing import Any, Optional, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger(__name__)


class AppError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ConfigurationError(AppError):
    """Faltan credenciales de TalkJS para el entorno pedido."""

    def __init__(self, message: str):
        super().__init__(message, 500)


class UpstreamError(AppError):
    """
    Error de la API de TalkJS: respuesta no 2xx o fallo de transporte.
    `status` y `body` quedan en None cuando no hubo respuesta HTTP.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: Optional[Any] = None,
    ):
        self.status = status
        self.body = body
        # Solo se reenvían status de error; cualquier otro caso es 500
        super().__init__(message, status if status and status >= 400 else 500)

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


def error_body(message: str, details: Any = None) -> dict:
    content = {"error": message}
    if details is not None:
        content["details"] = details
    return content


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(_: Request, exc: UpstreamError):
        logger.warning("UpstreamError (%s): %s", exc.status, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.body),
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(_: Request, exc: ConfigurationError):
        logger.error("ConfigurationError: %s", exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(AppError)
    async def app_error_handler(_: Request, exc: AppError):
        logger.warning("AppError: %s", exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content=error_body("Datos de entrada inválidos", jsonable_errors(exc)),
        )

    @app.exception_handler(ValidationError)
    async def model_validation_error_handler(_: Request, exc: ValidationError):
        logger.error("Datos de TalkJS no mapeables: %s", exc)
        return JSONResponse(
            status_code=500,
            content=error_body("Respuesta de TalkJS con formato inesperado", jsonable_errors(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail)))


def jsonable_errors(exc: Union[RequestValidationError, ValidationError]) -> list:
    # exc.errors() puede traer objetos no serializables en "ctx"
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
