"""
XML response decoding for the SQS query protocol.

Every function takes the raw response body and returns one of the dataclasses
in `models`. Namespaces and unknown elements are ignored. A body that is not
XML, or that lacks the result element for the action, raises `DecodeError`.
"""
from bs4 import BeautifulSoup, Tag
from lxml import etree

from sqsquery.enums import Action
from sqsquery.exceptions import DecodeError

from .models import (SqsBasicResponse, SqsEmptyReceiveResponse,
                     SqsErrorResponse, SqsListQueuesResponse,
                     SqsQueueUrlResponse, SqsReceiveMessageResponse,
                     SqsSendMessageResponse)
from .utils import unescape_message_body


def _parse(body: str | bytes, action: str) -> BeautifulSoup:
    # The soup builder recovers from broken markup, so well-formedness is
    # checked first.
    try:
        etree.fromstring(body.encode("utf-8") if isinstance(body, str) else body)
    except etree.XMLSyntaxError as e:
        raise DecodeError(action, f"malformed XML: {e}") from e

    return BeautifulSoup(body, "xml")


def _find_required(parent: Tag, name: str, action: str) -> Tag:
    el = parent.find(name)
    if not isinstance(el, Tag):
        raise DecodeError(action, f"missing <{name}> element")
    return el


def _text(parent: Tag | None, name: str, *, strip: bool = True) -> str:
    if parent is None:
        return ""
    el = parent.find(name)
    if not isinstance(el, Tag):
        return ""
    return el.text.strip() if strip else el.text


def _request_id(soup: BeautifulSoup) -> str:
    metadata_el = soup.find("ResponseMetadata")
    if not isinstance(metadata_el, Tag):
        return ""
    return _text(metadata_el, "RequestId")


def decode_send_message(body: str | bytes) -> SqsSendMessageResponse:
    soup = _parse(body, Action.SEND_MESSAGE.value)
    result_el = _find_required(soup, "SendMessageResult", Action.SEND_MESSAGE.value)

    return SqsSendMessageResponse(
        message_id=_text(result_el, "MessageId"),
        message_md5_digest=_text(result_el, "MD5OfMessageBody"),
        request_id=_request_id(soup),
    )


def decode_receive_message(
    body: str | bytes,
) -> SqsReceiveMessageResponse | SqsEmptyReceiveResponse:
    soup = _parse(body, Action.RECEIVE_MESSAGE.value)
    result_el = _find_required(
        soup, "ReceiveMessageResult", Action.RECEIVE_MESSAGE.value
    )
    request_id = _request_id(soup)

    message_el = result_el.find("Message")
    if not isinstance(message_el, Tag):
        return SqsEmptyReceiveResponse(request_id=request_id)

    message_body = _text(message_el, "Body", strip=False)
    message_md5_digest = _text(message_el, "MD5OfBody")
    if not message_body and not message_md5_digest:
        return SqsEmptyReceiveResponse(request_id=request_id)

    return SqsReceiveMessageResponse(
        message_id=_text(message_el, "MessageId"),
        message_md5_digest=message_md5_digest,
        message_body=unescape_message_body(message_body),
        receipt_handle=_text(message_el, "ReceiptHandle"),
        request_id=request_id,
    )


def decode_basic(body: str | bytes, action: Action) -> SqsBasicResponse:
    soup = _parse(body, action.value)
    _find_required(soup, f"{action.value}Response", action.value)

    return SqsBasicResponse(request_id=_request_id(soup))


def decode_queue_url(body: str | bytes, action: Action) -> SqsQueueUrlResponse:
    """
    CreateQueue and GetQueueUrl answer with the same shape under different
    result elements.
    """
    soup = _parse(body, action.value)
    result_el = _find_required(soup, f"{action.value}Result", action.value)
    queue_url_el = _find_required(result_el, "QueueUrl", action.value)

    return SqsQueueUrlResponse(
        queue_url=queue_url_el.text.strip(),
        request_id=_request_id(soup),
    )


def decode_list_queues(body: str | bytes) -> SqsListQueuesResponse:
    soup = _parse(body, Action.LIST_QUEUES.value)
    result_el = _find_required(soup, "ListQueuesResult", Action.LIST_QUEUES.value)

    queue_urls = []
    for queue_url_el in result_el.find_all("QueueUrl"):
        queue_urls.append(queue_url_el.text.strip())

    return SqsListQueuesResponse(queue_urls=queue_urls, request_id=_request_id(soup))


def decode_error(body: str | bytes) -> SqsErrorResponse:
    soup = _parse(body, "error")
    error_el = _find_required(soup, "Error", "error")

    return SqsErrorResponse(
        type=_text(error_el, "Type"),
        code=_text(error_el, "Code"),
        message=_text(error_el, "Message"),
    )
