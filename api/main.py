import logging
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import load_settings
from converter import INVALID_INPUT_MESSAGE, ConversionResult, CurrencyConverter
from errors import ServiceError

logger = logging.getLogger("currency-converter-api")


class ConvertRequest(BaseModel):
    fromCurrency: Any = None
    toCurrency: Any = None
    amount: Any = None


class ConvertResponse(BaseModel):
    message: str
    data: ConversionResult


class ConvertErrorResponse(BaseModel):
    message: str
    error: str


def get_converter() -> CurrencyConverter:
    return CurrencyConverter(load_settings())


def _failure_response(error: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "message": "Currency conversion failed. Please try again later.",
            "error": error,
        },
    )


def create_app() -> FastAPI:
    settings = load_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    if not settings.api_key:
        logger.warning("EXCHANGE_RATE_API_KEY is not set")

    app = FastAPI(title="Currency Converter API")
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    @app.post(
        "/convert",
        response_model=ConvertResponse,
        responses={500: {"model": ConvertErrorResponse}},
    )
    async def convert_endpoint(
        req: ConvertRequest, converter: CurrencyConverter = Depends(get_converter)
    ):
        try:
            result = await converter.convert(req.fromCurrency, req.toCurrency, req.amount)
        except ServiceError as exc:
            logger.error("Error in convert endpoint: %s (%s)", exc.message, exc.kind.name)
            return _failure_response(exc.message)
        return {"message": "Currency conversion successful", "data": result}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def _request_validation_handler(request: Request, exc: RequestValidationError):
    logger.error(
        "Rejected malformed request body: %s", [err["type"] for err in exc.errors()]
    )
    return _failure_response(INVALID_INPUT_MESSAGE)


app = create_app()
