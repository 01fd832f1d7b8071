import base64

from requests.auth import AuthBase


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class BasicAuth(AuthBase):
    """HTTP Basic auth with UTF-8 credentials.

    requests.auth.HTTPBasicAuth encodes str credentials as latin-1, which
    the server would not decode the same way for non-ASCII names.
    """

    def __init__(self, username: str, password: str):
        self._header = basic_auth_header(username, password)

    def __call__(self, request):
        request.headers["Authorization"] = self._header
        return request

    def __eq__(self, other):
        return isinstance(other, BasicAuth) and self._header == other._header

    def __ne__(self, other):
        return not self == other


class NoAuth(AuthBase):
    """Sends no Authorization header.

    Passing auth=None would let requests fill one in from ~/.netrc.
    """

    def __call__(self, request):
        request.headers.pop("Authorization", None)
        return request

    def __eq__(self, other):
        return isinstance(other, NoAuth)

    def __ne__(self, other):
        return not self == other
