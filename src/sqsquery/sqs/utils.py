import urllib.parse as urllib

from sqsquery.config import ClientConfig


def get_host(region: str) -> str:
    return f"sqs.{region}.amazonaws.com"


def queue_endpoint(config: ClientConfig) -> str:
    account_id = urllib.quote(config.account_id, safe="")
    queue_name = urllib.quote(config.queue_name, safe="")

    return f"https://{get_host(config.region)}/{account_id}/{queue_name}/"


def account_endpoint(config: ClientConfig) -> str:
    return f"https://{get_host(config.region)}/"


def get_endpoint(config: ClientConfig, *, scoped: bool) -> str:
    if scoped:
        return queue_endpoint(config)
    return account_endpoint(config)


def unescape_message_body(message_body: str) -> str:
    """
    Bodies go out percent-encoded by the form encoding of the request and are
    handed back in that form, so they are decoded exactly once here.
    """
    return urllib.unquote(message_body)
