import os
from dataclasses import dataclass, fields
from typing import List

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ClientConfig:
    region: str
    account_id: str
    queue_name: str
    access_key: str
    secret_key: str

    @classmethod
    def from_env(cls, **overrides: str | None) -> "ClientConfig":
        """
        Build a config from the environment. Keyword arguments that are not
        None win over the matching environment variable.
        """
        env = {
            "region": os.environ.get("SQS_REGION", ""),
            "account_id": os.environ.get("SQS_ACCOUNT_ID", ""),
            "queue_name": os.environ.get("SQS_QUEUE_NAME", ""),
            "access_key": os.environ.get("AWS_ACCESS_KEY_ID", ""),
            "secret_key": os.environ.get("AWS_SECRET_ACCESS_KEY", ""),
        }
        for k, v in overrides.items():
            if k not in env:
                raise TypeError(f"Unknown config field '{k}'")
            if v is not None:
                env[k] = v

        return cls(**env)

    def missing_fields(self, *, queue_scoped: bool = True) -> List[str]:
        missing = []
        for field in fields(self):
            if field.name == "queue_name" and not queue_scoped:
                continue
            value = getattr(self, field.name)
            if not value.strip():
                missing.append(field.name)

        return missing

    def validate(self, *, queue_scoped: bool = True):
        missing = self.missing_fields(queue_scoped=queue_scoped)
        if missing:
            raise ConfigurationError(missing)
