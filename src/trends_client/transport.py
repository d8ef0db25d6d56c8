"""HTTP transport with the single cookie-bearing retry Google Trends expects.

On first contact the service often answers 429 together with a challenge
cookie. Sending the same request again with that cookie attached is accepted;
further retries without a longer cool-down are not, so at most one retry is
made and its response is returned whatever its status.
"""

import logging
from enum import Enum
from typing import Optional

import httpx

from .errors import UnexpectedResponseError

logger = logging.getLogger(__name__)


class RetryState(Enum):
    INITIAL = "initial"
    RETRIED_ONCE = "retried_once"


def session_cookie(response: httpx.Response) -> Optional[str]:
    """Return the ``name=value`` pair of the first Set-Cookie header, if any."""
    values = response.headers.get_list("set-cookie")
    if not values:
        return None
    pair = values[0].split(";", 1)[0].strip()
    return pair or None


def with_cookie(request: httpx.Request, cookie: str) -> httpx.Request:
    """
    Copy ``request`` (method, URL, headers) with ``cookie`` as its Cookie header.

    Any Cookie header already on the request is replaced, not merged.
    """
    retry = httpx.Request(
        request.method,
        request.url,
        headers=request.headers,
        content=request.content or None,
        extensions=request.extensions,
    )
    retry.headers["Cookie"] = cookie
    return retry


class RetryingTransport:
    """Sends requests through an ``httpx.AsyncClient`` with the 429 retry policy."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def send(self, request: httpx.Request) -> httpx.Response:
        """
        Execute one logical request.

        Returns:
            The 200 response, or the response of the single retry made after
            a 429 carrying a Set-Cookie header.

        Raises:
            UnexpectedResponseError: for any other outcome
            httpx.HTTPError: for network level failures
        """
        state = RetryState.INITIAL

        while True:
            response = await self._client.send(request)

            if state is RetryState.RETRIED_ONCE:
                logger.info(f"Retry of {request.url.path} answered {response.status_code}")
                return response

            if response.status_code == 200:
                return response

            if response.status_code == 429:
                cookie = session_cookie(response)
                if cookie is not None:
                    logger.warning(f"Rate limited on {request.url.path}, retrying with session cookie")
                    request = with_cookie(request, cookie)
                    state = RetryState.RETRIED_ONCE
                    continue
                logger.warning(f"Rate limited on {request.url.path} without a session cookie")

            logger.error(f"Unexpected response {response.status_code} from {request.url.path}")
            raise UnexpectedResponseError(response.status_code, response.text)
