from .config import ClientConfig
from .sqs.client import SqsClient

__all__ = ["ClientConfig", "SqsClient"]
