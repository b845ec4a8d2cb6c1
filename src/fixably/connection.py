import contextlib
import json
import typing
import urllib.parse

from . import exceptions
from .config import Config, config as default_config
from .logger import get_logger
from .transport import RequestsTransport, Response, Transport

logger = get_logger(__name__)

_CLIENT_ERRORS: typing.Mapping[int, typing.Type[exceptions.ClientError]] = {
    400: exceptions.BadRequest,
    401: exceptions.UnauthorizedAccess,
    403: exceptions.ForbiddenAccess,
    404: exceptions.ResourceNotFound,
    405: exceptions.MethodNotAllowed,
    409: exceptions.ResourceConflict,
    410: exceptions.ResourceGone,
    422: exceptions.UnprocessableEntity,
}

_QUERY_SAFE_CHARACTERS = ",:()[]"


def response_code_allows_body(status_code: int) -> bool:
    return not (100 <= status_code < 200 or status_code in (204, 304))


def handle_response(response: Response, url: str) -> Response:
    """
    Returns ``response`` when its status denotes success and raises the matching
    :py:class:`fixably.exceptions.ConnectionError` otherwise.
    """
    status = response.status_code
    if 200 <= status < 300 or 100 <= status < 200:
        return response
    elif 300 <= status < 400:
        raise exceptions.Redirection(status, url, response.body)
    elif 400 <= status < 500:
        raise _CLIENT_ERRORS.get(status, exceptions.ClientError)(status, url, response.body)
    elif 500 <= status < 600:
        raise exceptions.ServerError(status, url, response.body)
    raise exceptions.ConnectionError(status, url, response.body)


def build_query_string(params: typing.Optional[typing.Mapping[str, str]]) -> str:
    if not params:
        return ""
    return urllib.parse.urlencode(sorted(params.items()), safe=_QUERY_SAFE_CHARACTERS)


class Connection:
    """
    A :py:class:`Connection` addresses Fixably with the configured credentials and
    turns failure statuses into exceptions.

    :param Config config: The settings the site URL and the headers are built from.
    :param Transport transport: The transport performing the round trips.
    """

    config: Config
    transport: Transport

    @property
    def headers(self) -> typing.Dict[str, str]:
        return {
            "Authorization": self.config.require("api_key"),
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def url_for(
        self, path: str, params: typing.Optional[typing.Mapping[str, str]] = None
    ) -> str:
        if path.startswith("https://") or path.startswith("http://"):
            url = path
        else:
            url = self.config.site + path
        query = build_query_string(params)
        return f"{url}?{query}" if query else url

    def request(
        self,
        method: str,
        path: str,
        params: typing.Optional[typing.Mapping[str, str]] = None,
        payload: typing.Any = None,
    ) -> Response:
        url = self.url_for(path, params)
        body = json.dumps(payload) if payload is not None else None
        headers = self.headers
        logger.debug("%s %s", method, url)
        response = self.transport.request(method, url, body=body, headers=headers)
        logger.debug("%s %s responded with %d", method, url, response.status_code)
        return handle_response(response, url)

    def get(self, path: str, params: typing.Optional[typing.Mapping[str, str]] = None) -> Response:
        return self.request("GET", path, params=params)

    def post(self, path: str, payload: typing.Any = None) -> Response:
        return self.request("POST", path, payload=payload)

    def put(self, path: str, payload: typing.Any = None) -> Response:
        return self.request("PUT", path, payload=payload)

    def delete(self, path: str) -> Response:
        return self.request("DELETE", path)

    def __init__(self, config: Config, transport: Transport):
        self.config = config
        self.transport = transport


_transport: typing.Optional[Transport] = None


def get_transport() -> Transport:
    global _transport
    if _transport is None:
        _transport = RequestsTransport()
    return _transport


@contextlib.contextmanager
def use_transport(transport: Transport) -> typing.Iterator[Transport]:
    """
    Routes every request made inside the block through ``transport``.
    """
    global _transport
    prev = _transport
    _transport = transport
    try:
        yield transport
    finally:
        _transport = prev


def get_connection() -> Connection:
    return Connection(default_config, get_transport())
