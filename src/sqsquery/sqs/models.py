from dataclasses import dataclass
from typing import List


@dataclass
class SqsBasicResponse:
    request_id: str


@dataclass
class SqsSendMessageResponse:
    message_id: str
    message_md5_digest: str
    request_id: str


@dataclass
class SqsReceiveMessageResponse:
    message_id: str
    message_md5_digest: str
    message_body: str
    receipt_handle: str
    request_id: str


@dataclass
class SqsEmptyReceiveResponse:
    """No message was available. Poll again later."""

    request_id: str


@dataclass
class SqsQueueUrlResponse:
    queue_url: str
    request_id: str


@dataclass
class SqsListQueuesResponse:
    queue_urls: List[str]
    request_id: str


@dataclass
class SqsErrorResponse:
    type: str
    code: str
    message: str

    def __str__(self):
        return f"Type: {self.type}, Code: {self.code}, Message: {self.message}"
