import urllib.parse
from typing import Callable, Dict, List

import httpx
import pytest

from sqsquery import ClientConfig, SqsClient


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        region="us-east-1",
        account_id="123456789012",
        queue_name="jobs",
        access_key="AKIDEXAMPLE",
        secret_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
    )


def parse_form(request: httpx.Request) -> Dict[str, str]:
    return dict(urllib.parse.parse_qsl(request.content.decode(), keep_blank_values=True))


@pytest.fixture
def requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_client(config, requests) -> Callable[..., SqsClient]:
    """
    Build an SqsClient whose transport answers every request with the given
    status and body, recording each request it sees.
    """

    def _make_client(body: str = "", status: int = 200, client_config=None):
        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(status, text=body)

        httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return SqsClient(client_config or config, httpx_client=httpx_client)

    return _make_client
