import logging

import aiohttp

from config import Settings

logger = logging.getLogger(__name__)


class UpstreamHTTPError(RuntimeError):
    """The pair endpoint answered with a non-2xx status."""

    def __init__(self, status: int, payload):
        super().__init__(f"ExchangeRate-API responded with HTTP {status}")
        self.status = status
        self.payload = payload


def build_pair_url(settings: Settings, from_code: str, to_code: str, amount) -> str:
    return f"{settings.base_url}/{settings.api_key}/pair/{from_code}/{to_code}/{amount}"


async def fetch_pair_conversion(
    settings: Settings, from_code: str, to_code: str, amount
) -> dict:
    """
    Fetch a pair conversion from ExchangeRate-API.

    Returns:
        The decoded JSON payload of a 2xx response.

    Raises:
        UpstreamHTTPError: If the response status is not 2xx. ``payload``
            holds the decoded body, or None when the body is not JSON.
        aiohttp.ClientError, asyncio.TimeoutError: On transport failures.
        ValueError: If a 2xx body is not valid JSON.
    """
    url = build_pair_url(settings, from_code, to_code, amount)
    logger.debug("GET %s", url.replace(settings.api_key, "***") if settings.api_key else url)

    session_kwargs = {}
    if settings.timeout:
        session_kwargs["timeout"] = aiohttp.ClientTimeout(total=settings.timeout)
    async with aiohttp.ClientSession(**session_kwargs) as session:
        async with session.get(url) as resp:
            if 200 <= resp.status < 300:
                return await resp.json(content_type=None)
            try:
                payload = await resp.json(content_type=None)
            except ValueError:
                payload = None
            raise UpstreamHTTPError(resp.status, payload)
