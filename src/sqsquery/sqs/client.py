from typing import Dict

from httpx import codes
from structlog import get_logger

from sqsquery.core import QueryClient
from sqsquery.enums import Action
from sqsquery.exceptions import DecodeError, ProtocolError

from .decoder import (decode_basic, decode_error, decode_list_queues,
                      decode_queue_url, decode_receive_message,
                      decode_send_message)
from .models import (SqsBasicResponse, SqsEmptyReceiveResponse,
                     SqsListQueuesResponse, SqsQueueUrlResponse,
                     SqsReceiveMessageResponse, SqsSendMessageResponse)

logger = get_logger()


def send_message_params(message_body: str) -> Dict[str, str]:
    return {"MessageBody": message_body}


def delete_message_params(receipt_handle: str) -> Dict[str, str]:
    return {"ReceiptHandle": receipt_handle}


def create_queue_params(
    name: str, attributes: Dict[str, str] | None = None
) -> Dict[str, str]:
    params = {"QueueName": name}
    for i, (k, v) in enumerate((attributes or {}).items(), start=1):
        params[f"Attribute.{i}.Name"] = k
        params[f"Attribute.{i}.Value"] = str(v)

    return params


def list_queues_params(prefix: str | None = None) -> Dict[str, str]:
    if prefix is None:
        return {}
    return {"QueueNamePrefix": prefix}


def get_queue_url_params(name: str) -> Dict[str, str]:
    return {"QueueName": name}


class SqsClient(QueryClient):
    async def _make_request(self, action: Action, params: Dict[str, str]) -> str:
        body, status = await self.dispatch(
            action, params, scoped=action.queue_scoped
        )
        if 200 <= status < 300:
            return body

        reason = codes.get_reason_phrase(status)
        try:
            error = decode_error(body)
        except DecodeError as e:
            raise ProtocolError(
                status, reason, body=body, note=f"error body not decoded: {e}"
            ) from e

        raise ProtocolError(status, reason, error=error, body=body)

    async def send_message(self, message_body: str) -> SqsSendMessageResponse:
        """
        The body is percent-encoded once, by the form encoding of the request,
        and `receive_message` decodes it once on the way back.
        """
        body = await self._make_request(
            Action.SEND_MESSAGE, send_message_params(message_body)
        )
        return decode_send_message(body)

    async def receive_message(
        self,
    ) -> SqsReceiveMessageResponse | SqsEmptyReceiveResponse:
        """
        Receive at most one message from the queue.

        An empty queue is not an error: a `SqsEmptyReceiveResponse` comes back
        instead of a message, and the caller should poll again later.
        """
        body = await self._make_request(Action.RECEIVE_MESSAGE, {})
        message = decode_receive_message(body)
        if isinstance(message, SqsEmptyReceiveResponse):
            logger.debug("No message to dequeue", request_id=message.request_id)

        return message

    async def delete_message(self, receipt_handle: str) -> SqsBasicResponse:
        body = await self._make_request(
            Action.DELETE_MESSAGE, delete_message_params(receipt_handle)
        )
        return decode_basic(body, Action.DELETE_MESSAGE)

    async def create_queue(
        self, name: str, *, attributes: Dict[str, str] | None = None
    ) -> SqsQueueUrlResponse:
        """
        Attributes are sent as `Attribute.<n>.Name` / `Attribute.<n>.Value`
        pairs numbered from 1 in iteration order, e.g.
        `{"VisibilityTimeout": "40"}`.
        """
        body = await self._make_request(
            Action.CREATE_QUEUE, create_queue_params(name, attributes)
        )
        return decode_queue_url(body, Action.CREATE_QUEUE)

    async def list_queues(self, prefix: str | None = None) -> SqsListQueuesResponse:
        body = await self._make_request(
            Action.LIST_QUEUES, list_queues_params(prefix)
        )
        return decode_list_queues(body)

    async def get_queue_url(self, name: str) -> SqsQueueUrlResponse:
        body = await self._make_request(
            Action.GET_QUEUE_URL, get_queue_url_params(name)
        )
        return decode_queue_url(body, Action.GET_QUEUE_URL)
