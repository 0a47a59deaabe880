import dataclasses

import httpx
import pytest

from sqsquery import SqsClient
from sqsquery.exceptions import DecodeError, ProtocolError
from sqsquery.sqs.client import create_queue_params
from sqsquery.sqs.models import (SqsBasicResponse, SqsEmptyReceiveResponse,
                                 SqsErrorResponse, SqsListQueuesResponse,
                                 SqsQueueUrlResponse,
                                 SqsReceiveMessageResponse,
                                 SqsSendMessageResponse)

from .conftest import parse_form

ERROR_RESPONSE = (
    "<ErrorResponse><Error><Type>Sender</Type><Code>InvalidParameterValue</Code>"
    "<Message>bad</Message></Error><RequestId>req-e</RequestId></ErrorResponse>"
)


@pytest.mark.asyncio
async def test_send_message(make_client, requests):
    client = make_client(
        body=(
            "<SendMessageResponse><SendMessageResult><MessageId>abc</MessageId>"
            "<MD5OfMessageBody>xyz</MD5OfMessageBody></SendMessageResult>"
            "</SendMessageResponse>"
        )
    )

    async with client:
        res = await client.send_message("hello world")

    assert res == SqsSendMessageResponse(
        message_id="abc", message_md5_digest="xyz", request_id=""
    )

    content = requests[0].content.decode()
    assert "Action=SendMessage" in content
    assert "MessageBody=hello%20world" in content
    assert "&Signature=" in content
    assert "/123456789012/jobs/" in requests[0].url.path


@pytest.mark.asyncio
async def test_receive_message(make_client, requests):
    client = make_client(
        body=(
            "<ReceiveMessageResponse><ReceiveMessageResult><Message>"
            "<MessageId>id-1</MessageId><ReceiptHandle>handle-1</ReceiptHandle>"
            "<MD5OfBody>md5</MD5OfBody><Body>hello%20world</Body>"
            "</Message></ReceiveMessageResult>"
            "<ResponseMetadata><RequestId>req-r</RequestId></ResponseMetadata>"
            "</ReceiveMessageResponse>"
        )
    )

    async with client:
        res = await client.receive_message()

    assert res == SqsReceiveMessageResponse(
        message_id="id-1",
        message_md5_digest="md5",
        message_body="hello world",
        receipt_handle="handle-1",
        request_id="req-r",
    )
    assert parse_form(requests[0])["Action"] == "ReceiveMessage"


@pytest.mark.asyncio
async def test_receive_message_empty_queue(make_client):
    client = make_client(
        body=(
            "<ReceiveMessageResponse><ReceiveMessageResult/>"
            "<ResponseMetadata><RequestId>req-empty</RequestId></ResponseMetadata>"
            "</ReceiveMessageResponse>"
        )
    )

    async with client:
        res = await client.receive_message()

    assert res == SqsEmptyReceiveResponse(request_id="req-empty")


@pytest.mark.asyncio
async def test_receive_message_garbage_is_decode_error(make_client):
    client = make_client(body="Service Unavailable")

    async with client:
        with pytest.raises(DecodeError):
            await client.receive_message()


@pytest.mark.asyncio
async def test_send_then_receive_round_trip(config, requests):
    text = "50% off & <free> shipping"
    stored = {}

    def handler(request):
        requests.append(request)
        content = request.content.decode()
        if "Action=SendMessage" in content:
            for pair in content.split("&"):
                if pair.startswith("MessageBody="):
                    stored["body"] = pair.removeprefix("MessageBody=")
            return httpx.Response(
                200,
                text="<SendMessageResponse><SendMessageResult><MessageId>m</MessageId>"
                "<MD5OfMessageBody>d</MD5OfMessageBody></SendMessageResult></SendMessageResponse>",
            )
        return httpx.Response(
            200,
            text="<ReceiveMessageResponse><ReceiveMessageResult><Message>"
            "<MessageId>m</MessageId><ReceiptHandle>h</ReceiptHandle>"
            f"<MD5OfBody>d</MD5OfBody><Body>{stored['body']}</Body>"
            "</Message></ReceiveMessageResult></ReceiveMessageResponse>",
        )

    httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    async with SqsClient(config, httpx_client=httpx_client) as client:
        await client.send_message(text)
        res = await client.receive_message()

    assert res.message_body == text


@pytest.mark.asyncio
async def test_delete_message(make_client, requests):
    client = make_client(
        body=(
            "<DeleteMessageResponse><ResponseMetadata><RequestId>req-d</RequestId>"
            "</ResponseMetadata></DeleteMessageResponse>"
        )
    )

    async with client:
        res = await client.delete_message("handle-1")

    assert res == SqsBasicResponse(request_id="req-d")
    form = parse_form(requests[0])
    assert form["Action"] == "DeleteMessage"
    assert form["ReceiptHandle"] == "handle-1"
    assert "/123456789012/jobs/" in requests[0].url.path


def test_create_queue_params_attribute_numbering():
    assert create_queue_params("jobs", {"VisibilityTimeout": "40"}) == {
        "QueueName": "jobs",
        "Attribute.1.Name": "VisibilityTimeout",
        "Attribute.1.Value": "40",
    }
    assert create_queue_params(
        "jobs", {"VisibilityTimeout": "40", "DelaySeconds": "5"}
    ) == {
        "QueueName": "jobs",
        "Attribute.1.Name": "VisibilityTimeout",
        "Attribute.1.Value": "40",
        "Attribute.2.Name": "DelaySeconds",
        "Attribute.2.Value": "5",
    }
    assert create_queue_params("jobs") == {"QueueName": "jobs"}


@pytest.mark.asyncio
async def test_create_queue(make_client, requests):
    client = make_client(
        body=(
            "<CreateQueueResponse><CreateQueueResult>"
            "<QueueUrl>https://sqs.us-east-1.amazonaws.com/123456789012/new</QueueUrl>"
            "</CreateQueueResult></CreateQueueResponse>"
        )
    )

    async with client:
        res = await client.create_queue(
            "new", attributes={"VisibilityTimeout": "40"}
        )

    assert res == SqsQueueUrlResponse(
        queue_url="https://sqs.us-east-1.amazonaws.com/123456789012/new",
        request_id="",
    )
    form = parse_form(requests[0])
    assert form["Action"] == "CreateQueue"
    assert form["QueueName"] == "new"
    assert form["Attribute.1.Name"] == "VisibilityTimeout"
    assert form["Attribute.1.Value"] == "40"
    assert requests[0].url.path == "/"


@pytest.mark.asyncio
async def test_list_queues(make_client, requests):
    client = make_client(
        body=(
            "<ListQueuesResponse><ListQueuesResult>"
            "<QueueUrl>https://sqs.us-east-1.amazonaws.com/123456789012/jobs</QueueUrl>"
            "</ListQueuesResult></ListQueuesResponse>"
        )
    )

    async with client:
        res = await client.list_queues("jo")

    assert res == SqsListQueuesResponse(
        queue_urls=["https://sqs.us-east-1.amazonaws.com/123456789012/jobs"],
        request_id="",
    )
    form = parse_form(requests[0])
    assert form["QueueNamePrefix"] == "jo"
    assert requests[0].url.path == "/"


@pytest.mark.asyncio
async def test_list_queues_without_prefix(make_client, requests):
    client = make_client(
        body="<ListQueuesResponse><ListQueuesResult/></ListQueuesResponse>"
    )

    async with client:
        await client.list_queues()

    assert "QueueNamePrefix" not in parse_form(requests[0])


@pytest.mark.asyncio
async def test_get_queue_url(make_client, requests, config):
    client = make_client(
        body=(
            "<GetQueueUrlResponse><GetQueueUrlResult>"
            "<QueueUrl>https://sqs.us-east-1.amazonaws.com/123456789012/other</QueueUrl>"
            "</GetQueueUrlResult></GetQueueUrlResponse>"
        ),
        client_config=dataclasses.replace(config, queue_name=""),
    )

    async with client:
        res = await client.get_queue_url("other")

    assert res.queue_url == "https://sqs.us-east-1.amazonaws.com/123456789012/other"
    assert parse_form(requests[0])["QueueName"] == "other"
    assert requests[0].url.path == "/"


@pytest.mark.asyncio
async def test_error_response_raises_protocol_error(make_client):
    client = make_client(body=ERROR_RESPONSE, status=400)

    async with client:
        with pytest.raises(ProtocolError) as exc_info:
            await client.send_message("hello")

    assert exc_info.value.status == 400
    assert exc_info.value.reason == "Bad Request"
    assert exc_info.value.error == SqsErrorResponse(
        type="Sender", code="InvalidParameterValue", message="bad"
    )
    assert "InvalidParameterValue" in str(exc_info.value)


@pytest.mark.asyncio
async def test_undecodable_error_response_keeps_status(make_client):
    client = make_client(body="<html>Bad Gateway</html>", status=502)

    async with client:
        with pytest.raises(ProtocolError) as exc_info:
            await client.receive_message()

    assert exc_info.value.status == 502
    assert exc_info.value.error is None
    assert exc_info.value.body == "<html>Bad Gateway</html>"
    assert "not decoded" in exc_info.value.note
    assert "502" in str(exc_info.value)


@pytest.mark.asyncio
async def test_truncated_receive_is_decode_error_not_empty(make_client):
    client = make_client(
        body="<ReceiveMessageResponse><ReceiveMessageResult><Message><MessageId>m-1"
    )

    async with client:
        with pytest.raises(DecodeError):
            await client.receive_message()


@pytest.mark.asyncio
async def test_truncated_error_body_keeps_status(make_client):
    client = make_client(body="<ErrorResponse><Error><Code>Acc", status=500)

    async with client:
        with pytest.raises(ProtocolError) as exc_info:
            await client.delete_message("handle-1")

    assert exc_info.value.status == 500
    assert exc_info.value.error is None
    assert "malformed XML" in exc_info.value.note
