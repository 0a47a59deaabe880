from typing import Dict, Tuple

import httpx
from httpx import AsyncClient
from structlog import get_logger

from .auth import (SIGNATURE_METHOD, SIGNATURE_VERSION,
                   get_canonical_querystring, get_signature, get_timestamp)
from .config import ClientConfig
from .enums import Action
from .exceptions import TransportError
from .sqs.utils import get_endpoint

logger = get_logger()

API_VERSION = "2012-11-05"


class QueryClient:
    def __init__(
        self,
        config: ClientConfig,
        *,
        method: str = "POST",
        version: str = API_VERSION,
        httpx_client: AsyncClient | None = None,
    ):
        self.config = config
        self.method = method
        self.version = version

        self._injected_httpx = httpx_client
        self._httpx = httpx_client

    async def connect(self):
        assert self._httpx is None, "QueryClient already connected"
        if self._injected_httpx is not None:
            self._httpx = self._injected_httpx
        else:
            self._httpx = AsyncClient(timeout=None)

    async def disconnect(self):
        assert self._httpx is not None, "QueryClient is not connected"
        # An injected client belongs to the caller and stays open.
        if self._httpx is not self._injected_httpx:
            await self._httpx.aclose()
        self._httpx = None

    async def __aenter__(self):
        if self._httpx is None:
            await self.connect()
        return self

    async def __aexit__(self, *exc_info):
        await self.disconnect()

    def build_params(self, action: Action, params: Dict[str, str]) -> Dict[str, str]:
        envelope = {
            "Action": action.value,
            "AWSAccessKeyId": self.config.access_key,
            "SignatureVersion": SIGNATURE_VERSION,
            "SignatureMethod": SIGNATURE_METHOD,
            "Version": self.version,
            "Timestamp": get_timestamp(),
        }
        envelope.update(params)

        return envelope

    def sign_params(self, endpoint_url: str, params: Dict[str, str]) -> Dict[str, str]:
        signature = get_signature(
            endpoint_url=endpoint_url,
            method=self.method,
            secret_key=self.config.secret_key,
            params=params,
        )

        return {**params, "Signature": signature}

    async def dispatch(
        self, action: Action, params: Dict[str, str], *, scoped: bool
    ) -> Tuple[str, int]:
        """
        Send a single signed request and hand back the raw body and status.
        The status is not interpreted here; non-2xx responses are returned
        like any other so the caller can decode the error document.
        """
        assert isinstance(self._httpx, AsyncClient), "QueryClient is not connected"

        self.config.validate(queue_scoped=scoped)

        endpoint_url = get_endpoint(self.config, scoped=scoped)
        signed_params = self.sign_params(
            endpoint_url, self.build_params(action, params)
        )

        logger.debug("Dispatching request", action=action.value, url=endpoint_url)

        try:
            res = await self._httpx.request(
                method=self.method,
                url=endpoint_url,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                content=get_canonical_querystring(signed_params),
            )
        except httpx.TransportError as e:
            raise TransportError(action.value, e) from e

        logger.debug(
            "Received response",
            action=action.value,
            status_code=res.status_code,
            reason=res.reason_phrase,
        )

        return res.text, res.status_code
