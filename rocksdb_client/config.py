import os

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .exceptions import InvalidArgument

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8516
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 30.0


class ClientConfig(BaseModel):
    """Connection settings for a StoreClient. Frozen once built.

    Bad settings raise InvalidArgument, whether they come from keyword
    arguments or from the environment.
    """

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    auth_enabled: bool = False
    username: str | None = None
    password: str | None = Field(None, repr=False)
    connect_timeout: float = Field(DEFAULT_CONNECT_TIMEOUT, gt=0)
    read_timeout: float = Field(DEFAULT_READ_TIMEOUT, gt=0)
    # put() sends None values as null markers unless this is switched off
    allow_null_values: bool = True

    @model_validator(mode="before")
    @classmethod
    def enable_auth_for_credentials(cls, data):
        if isinstance(data, dict) and "auth_enabled" not in data:
            if data.get("username") is not None or data.get("password") is not None:
                data = {**data, "auth_enabled": True}
        return data

    @model_validator(mode="after")
    def check_credentials(self):
        has_credentials = self.username is not None and self.password is not None
        if self.auth_enabled and not has_credentials:
            raise ValueError("auth_enabled requires both username and password")
        if not self.auth_enabled and (self.username is not None or self.password is not None):
            raise ValueError("username/password given but auth_enabled is False")
        return self

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise InvalidArgument(f"Invalid client configuration: {e}") from e

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def timeout(self) -> tuple:
        return (self.connect_timeout, self.read_timeout)

    @classmethod
    def from_env(cls, prefix: str = "ROCKSDB_", **overrides) -> "ClientConfig":
        """Read settings from environment variables, e.g. ROCKSDB_HOST.

        Keyword overrides win over the environment; unset variables keep
        the defaults.
        """
        env = {
            "host": os.getenv(f"{prefix}HOST"),
            "port": os.getenv(f"{prefix}PORT"),
            "username": os.getenv(f"{prefix}USERNAME"),
            "password": os.getenv(f"{prefix}PASSWORD"),
            "connect_timeout": os.getenv(f"{prefix}CONNECT_TIMEOUT"),
            "read_timeout": os.getenv(f"{prefix}READ_TIMEOUT"),
        }
        settings = {name: value for name, value in env.items() if value}
        settings.update({name: value for name, value in overrides.items() if value is not None})
        return cls(**settings)
