import logging
from collections.abc import Sequence

import requests
from pydantic import BaseModel, ValidationError

from . import codec
from .auth import BasicAuth, NoAuth
from .config import ClientConfig
from .exceptions import ApplicationError, CommunicationFailure, InvalidArgument
from .models import Envelope, KeysRequest, NameRequest, PutRequest

logger = logging.getLogger(__name__)

SINGLE_KEY_TYPES = (bytes, bytearray, memoryview, str)

Key = codec.BytesLike
Value = Key | None


class StoreClient:
    """Client for a key-value storage server speaking JSON over HTTP.

    Keys and values are raw bytes, Base64-encoded on the wire. Every public
    method performs exactly one POST; a list or tuple of keys turns a call
    into a batch, answered by a single request.

        with StoreClient(host="10.0.0.5", username="u", password="p") as db:
            db.put("users", b"k", b"v")
            db.get("users", b"k")            # b"v"
            db.get("users", [b"k", b"x"])    # [b"v", None]
    """

    def __init__(self, config: ClientConfig | None = None, session: requests.Session | None = None, **settings):
        if config is not None and settings:
            raise InvalidArgument("Pass either a ClientConfig or keyword settings, not both")
        self.config = config if config is not None else ClientConfig(**settings)
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self._auth = BasicAuth(self.config.username, self.config.password) if self.config.auth_enabled else NoAuth()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        if self._owns_session:
            self.session.close()

    def __repr__(self):
        return f"StoreClient({self.config.base_url!r}, auth_enabled={self.config.auth_enabled})"

    # -- data operations -------------------------------------------------

    def get(self, db: str, keys: Key | Sequence[Key]) -> Value | list[Value]:
        """Return the value for a key, or a list of values for a list of keys.

        Absent keys come back as None in their position.
        """
        self._check_db(db)
        single = isinstance(keys, SINGLE_KEY_TYPES)
        batch = self._check_keys([keys] if single else keys)
        request = KeysRequest(name=db, keys=[codec.encode(k) for k in batch])
        body = self._call("/get", request)
        values = self._decode_values(body, len(batch))
        return values[0] if single else values

    def put(self, db: str, keys: Key | Sequence[Key], values: Value | Sequence[Value]) -> None:
        self._check_db(db)
        if isinstance(keys, SINGLE_KEY_TYPES):
            keys, values = [keys], [values]
        batch = self._check_keys(keys)
        if values is None:
            raise InvalidArgument("Values can not be None")
        if not isinstance(values, (list, tuple)):
            raise InvalidArgument("Values must be a list or tuple when keys are")
        if len(values) != len(batch):
            raise InvalidArgument("Number of keys and values does not match")
        if not self.config.allow_null_values and any(v is None for v in values):
            raise InvalidArgument("Value can not be None")
        for value in values:
            if value is not None and not isinstance(value, SINGLE_KEY_TYPES):
                raise InvalidArgument(f"Unsupported value type: {type(value).__name__}")
        request = PutRequest(
            name=db,
            keys=[codec.encode(k) for k in batch],
            values=[codec.encode_optional(v) for v in values],
        )
        self._call("/put", request)

    def delete(self, db: str, keys: Key | Sequence[Key]) -> None:
        """Delete one or more keys. Deleting a missing key is not an error."""
        self._check_db(db)
        batch = self._check_keys([keys] if isinstance(keys, SINGLE_KEY_TYPES) else keys)
        self._call("/delete", KeysRequest(name=db, keys=[codec.encode(k) for k in batch]))

    # -- database administration -----------------------------------------

    def create_database(self, db: str) -> None:
        self._check_db(db)
        self._call("/create", NameRequest(name=db))

    def drop_database(self, db: str) -> None:
        self._check_db(db)
        self._call("/drop", NameRequest(name=db))

    def get_stats(self, db: str) -> str:
        self._check_db(db)
        body = self._call("/stats", NameRequest(name=db))
        if not isinstance(body, str):
            raise CommunicationFailure(f"Malformed response from /stats: expected a string, got {type(body).__name__}")
        return body

    # -- helpers ---------------------------------------------------------

    @staticmethod
    def _check_db(db):
        if db is None:
            raise InvalidArgument("Database name can not be None")
        if not isinstance(db, str):
            raise InvalidArgument(f"Database name must be a string, got {type(db).__name__}")

    @staticmethod
    def _check_keys(keys) -> list:
        if keys is None:
            raise InvalidArgument("Keys can not be None")
        if not isinstance(keys, (list, tuple)):
            raise InvalidArgument(f"Keys must be bytes, str, or a list/tuple of them, got {type(keys).__name__}")
        if len(keys) < 1:
            raise InvalidArgument("At least one key is required")
        for key in keys:
            if key is None:
                raise InvalidArgument("Key can not be None")
            if not isinstance(key, SINGLE_KEY_TYPES):
                raise InvalidArgument(f"Unsupported key type: {type(key).__name__}")
        return list(keys)

    @staticmethod
    def _decode_values(body, expected: int) -> list[Value]:
        if not isinstance(body, list):
            raise CommunicationFailure(f"Malformed response from /get: expected a list, got {type(body).__name__}")
        if len(body) != expected:
            raise CommunicationFailure(f"Malformed response from /get: asked for {expected} keys, got {len(body)} values")
        try:
            return [codec.decode_optional(item) for item in body]
        except ValueError as e:
            raise CommunicationFailure(f"Malformed response from /get: {e}") from e

    def _call(self, path: str, request: BaseModel):
        url = f"{self.config.base_url}{path}"
        keys = getattr(request, "keys", None)
        logger.debug("POST %s db=%s keys=%s", url, request.name, len(keys) if keys is not None else "-")
        try:
            response = self.session.post(
                url,
                json=request.model_dump(mode="json"),
                auth=self._auth,
                timeout=self.config.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("Request to %s failed: %s", url, e)
            raise CommunicationFailure(f"Cannot reach {self.config.base_url}: {e}") from e

        try:
            envelope = Envelope.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning("Unreadable response from %s (HTTP %s)", url, response.status_code)
            raise CommunicationFailure(
                f"Unreadable response from {path} (HTTP {response.status_code}): {e}"
            ) from e

        if not envelope.ok:
            logger.warning("%s returned code %s: %s", path, envelope.code, envelope.message)
            raise ApplicationError(envelope.code, envelope.message)
        if not response.ok:
            logger.warning("%s returned HTTP %s with an OK envelope", path, response.status_code)
            raise ApplicationError(response.status_code, envelope.message or response.reason)
        return envelope.body
