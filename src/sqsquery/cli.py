import argparse
import asyncio
import sys
from typing import Dict, List

import aiofiles
from structlog import get_logger

from .config import ClientConfig
from .enums import Action
from .exceptions import SqsError
from .logging import configure_logging
from .sqs.client import SqsClient
from .sqs.models import SqsEmptyReceiveResponse

logger = get_logger()

FLAG_USAGE = {
    "access_key": "AWS Access Key",
    "secret_key": "AWS Secret Key",
    "region": "AWS Region ID",
    "account_id": "AWS Account ID",
    "queue_name": "AWS Queue Name",
}

COMMAND_ACTIONS = {
    "send": Action.SEND_MESSAGE,
    "receive": Action.RECEIVE_MESSAGE,
    "delete": Action.DELETE_MESSAGE,
    "create": Action.CREATE_QUEUE,
    "list": Action.LIST_QUEUES,
    "url": Action.GET_QUEUE_URL,
}


def parse_attributes(values: List[str]) -> Dict[str, str]:
    attributes = {}
    for value in values:
        name, sep, attribute_value = value.partition("=")
        if not sep or not name:
            raise argparse.ArgumentTypeError(
                f"attribute '{value}' must look like NAME=VALUE"
            )
        attributes[name] = attribute_value

    return attributes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqsquery", description="Talk to an SQS queue over the query API."
    )
    parser.add_argument("--accesskey", dest="access_key", help=FLAG_USAGE["access_key"])
    parser.add_argument("--secret", dest="secret_key", help=FLAG_USAGE["secret_key"])
    parser.add_argument("--region", dest="region", help=FLAG_USAGE["region"])
    parser.add_argument("--account", dest="account_id", help=FLAG_USAGE["account_id"])
    parser.add_argument("--queue", dest="queue_name", help=FLAG_USAGE["queue_name"])
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )

    commands = parser.add_subparsers(dest="command", required=True)

    send = commands.add_parser("send", help="Send a message")
    send_body = send.add_mutually_exclusive_group(required=True)
    send_body.add_argument("message", nargs="?")
    send_body.add_argument("--file", help="Read the message body from a file")

    receive = commands.add_parser("receive", help="Receive one message")
    receive.add_argument(
        "--delete", action="store_true", help="Delete the message once received"
    )

    delete = commands.add_parser("delete", help="Delete a message")
    delete.add_argument("receipt_handle")

    create = commands.add_parser("create", help="Create a queue")
    create.add_argument("name")
    create.add_argument(
        "--attribute",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Queue attribute, may be repeated",
    )

    list_ = commands.add_parser("list", help="List queues")
    list_.add_argument("--prefix")

    url = commands.add_parser("url", help="Look up a queue URL")
    url.add_argument("name")

    return parser


def validate_inputs(config: ClientConfig, *, queue_scoped: bool) -> List[str]:
    errors = []
    for field_name in config.missing_fields(queue_scoped=queue_scoped):
        errors.append(f"{FLAG_USAGE[field_name]} needs to be set.")

    if errors:
        logger.error("Encountered errors", errors=errors)

    return errors


async def read_message_file(filepath: str) -> str:
    async with aiofiles.open(filepath, "r") as f:
        return await f.read()


async def run(args: argparse.Namespace, config: ClientConfig) -> int:
    async with SqsClient(config) as client:
        match args.command:
            case "send":
                if args.file is not None:
                    message_body = await read_message_file(args.file)
                else:
                    message_body = args.message
                res = await client.send_message(message_body)
                logger.info("Message sent", message_id=res.message_id)
                print(res.message_id)

            case "receive":
                res = await client.receive_message()
                if isinstance(res, SqsEmptyReceiveResponse):
                    logger.info("No message to dequeue")
                    return 0
                logger.info("Message received", message_id=res.message_id)
                print(res.message_body)

                if args.delete:
                    await client.delete_message(res.receipt_handle)
                    logger.info("Message deleted", message_id=res.message_id)
                else:
                    print(res.receipt_handle)

            case "delete":
                await client.delete_message(args.receipt_handle)
                logger.info("Message deleted")

            case "create":
                res = await client.create_queue(
                    args.name, attributes=args.attributes
                )
                print(res.queue_url)

            case "list":
                res = await client.list_queues(args.prefix)
                for queue_url in res.queue_urls:
                    print(queue_url)

            case "url":
                res = await client.get_queue_url(args.name)
                print(res.queue_url)

    return 0


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "create":
        try:
            args.attributes = parse_attributes(args.attribute)
        except argparse.ArgumentTypeError as e:
            parser.error(str(e))
    configure_logging(args.log_level)

    config = ClientConfig.from_env(
        region=args.region,
        account_id=args.account_id,
        queue_name=args.queue_name,
        access_key=args.access_key,
        secret_key=args.secret_key,
    )
    queue_scoped = COMMAND_ACTIONS[args.command].queue_scoped
    if validate_inputs(config, queue_scoped=queue_scoped):
        logger.error("Aborting")
        return 2

    try:
        return asyncio.run(run(args, config))
    except SqsError as e:
        logger.error("Request failed", command=args.command, error=str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
