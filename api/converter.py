import logging
import math
import re
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from config import Settings
from errors import ServiceError
from rate_fetcher import UpstreamHTTPError, fetch_pair_conversion

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = (
    "Invalid input. Please provide 'fromCurrency', 'toCurrency', and a valid 'amount'."
)
GENERIC_FAILURE_MESSAGE = "Currency conversion failed. Please try again."

PROVIDER_ERRORS = {
    "unsupported-code": (ServiceError.not_found, "Unsupported currency code provided."),
    "malformed-request": (
        ServiceError.bad_request,
        "Malformed request. Please check the request structure.",
    ),
    "invalid-key": (ServiceError.unauthorized, "Invalid API key. Please verify your API key."),
    "inactive-account": (
        ServiceError.unauthorized,
        "Inactive account. Please confirm your email address.",
    ),
    "quota-reached": (
        ServiceError.internal_server,
        "API request quota reached. Please upgrade your plan.",
    ),
}
UNKNOWN_PROVIDER_ERROR = (
    ServiceError.internal_server,
    "Unknown error occurred while processing the request.",
)
NUMERIC_STRING = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


class ConversionResult(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    from_currency: str
    to_currency: str
    amount: float
    converted_amount: float
    conversion_rate: float
    last_updated: str | None = None
    next_update: str | None = None


def parse_amount(amount) -> float:
    """
    Parse a requested amount into a float.

    Falsy amounts (None, "", 0) count as missing. The string "0" is not
    falsy and is accepted.
    """
    if not amount or isinstance(amount, bool):
        raise ServiceError.bad_request(INVALID_INPUT_MESSAGE)
    if not isinstance(amount, (int, float, str)):
        raise ServiceError.bad_request(INVALID_INPUT_MESSAGE)
    if isinstance(amount, str) and not NUMERIC_STRING.fullmatch(amount.strip()):
        raise ServiceError.bad_request(INVALID_INPUT_MESSAGE)
    try:
        value = float(amount)
    except (ValueError, OverflowError):
        raise ServiceError.bad_request(INVALID_INPUT_MESSAGE) from None
    if not math.isfinite(value):
        raise ServiceError.bad_request(INVALID_INPUT_MESSAGE)
    return value


def round_half_up(value) -> float:
    return float(Decimal(float(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def map_provider_error(error_type: str) -> ServiceError:
    factory, message = PROVIDER_ERRORS.get(error_type, UNKNOWN_PROVIDER_ERROR)
    return factory(message)


class CurrencyConverter:
    """Converts amounts through the ExchangeRate-API pair endpoint."""

    def __init__(self, settings: Settings, fetcher=fetch_pair_conversion):
        self.settings = settings
        self.fetcher = fetcher

    async def convert(self, from_currency, to_currency, amount) -> ConversionResult:
        """
        Validate input, fetch the pair conversion and build the result.

        Raises:
            ServiceError: On invalid input or any upstream failure.
        """
        if not from_currency or not to_currency:
            raise ServiceError.bad_request(INVALID_INPUT_MESSAGE)
        if not isinstance(from_currency, str) or not isinstance(to_currency, str):
            raise ServiceError.bad_request(INVALID_INPUT_MESSAGE)
        requested = parse_amount(amount)
        if isinstance(amount, str):
            amount = amount.strip()

        try:
            data = await self.fetcher(
                self.settings, from_currency.upper(), to_currency.upper(), amount
            )
            if data.get("result") != "success":
                raise ServiceError.not_found(
                    "Currency conversion failed. Please check the currency codes or API usage."
                )
            return ConversionResult(
                from_currency=data["base_code"],
                to_currency=data["target_code"],
                amount=requested,
                converted_amount=round_half_up(data["conversion_result"]),
                conversion_rate=data["conversion_rate"],
                last_updated=data.get("time_last_update_utc"),
                next_update=data.get("time_next_update_utc"),
            )
        except ServiceError:
            raise
        except UpstreamHTTPError as exc:
            payload = exc.payload
            if isinstance(payload, dict) and payload.get("error-type"):
                logger.warning(
                    "ExchangeRate-API error %s (HTTP %d)", payload["error-type"], exc.status
                )
                raise map_provider_error(payload["error-type"]) from exc
            logger.error("Error during currency conversion: %s", exc)
            raise ServiceError.internal_server(GENERIC_FAILURE_MESSAGE) from exc
        except Exception as exc:
            logger.exception("Error during currency conversion: %s", exc)
            raise ServiceError.internal_server(GENERIC_FAILURE_MESSAGE) from exc
