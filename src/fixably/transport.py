"""
This module contains the transport interface requests are sent through, along with
the default implementation built on :py:mod:`requests`.

"""
import abc
import dataclasses
import json
import typing

import requests

from .config import config as default_config


@dataclasses.dataclass
class Response:
    status_code: int
    body: str = ""
    headers: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)

    def json(self) -> typing.Any:
        if not self.body or not self.body.strip():
            return None
        return json.loads(self.body)


class Transport(metaclass=abc.ABCMeta):
    """
    A :py:class:`Transport` performs one HTTP round trip. Retries, TLS and timeouts are
    all the transport's business.
    """

    @abc.abstractmethod
    def request(
        self,
        method: str,
        url: str,
        body: typing.Optional[str] = None,
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> Response:
        """
        Sends a request and returns its response whatever the status code.

        :param str method: The HTTP method in upper case.
        :param str url: The absolute URL including the query string.
        :param str body: The serialized request body, if any.
        :param Mapping headers: The request headers.
        :return: The :py:class:`Response`.
        """
        ...  # pragma: nocover

    def get(self, url: str, headers: typing.Optional[typing.Mapping[str, str]] = None) -> Response:
        return self.request("GET", url, headers=headers)

    def post(
        self,
        url: str,
        body: typing.Optional[str] = None,
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> Response:
        return self.request("POST", url, body=body, headers=headers)

    def put(
        self,
        url: str,
        body: typing.Optional[str] = None,
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> Response:
        return self.request("PUT", url, body=body, headers=headers)

    def delete(
        self, url: str, headers: typing.Optional[typing.Mapping[str, str]] = None
    ) -> Response:
        return self.request("DELETE", url, headers=headers)


class RequestsTransport(Transport):
    """
    Sends requests through a :py:class:`requests.Session`.

    :param session: The session to reuse, a new one by default.
    :param float timeout: The timeout in seconds. When omitted, the configured
                          ``timeout`` at the time of each request applies.
    """

    session: requests.Session
    timeout: typing.Optional[float]

    def request(
        self,
        method: str,
        url: str,
        body: typing.Optional[str] = None,
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> Response:
        resp = self.session.request(
            method,
            url,
            data=body.encode("utf-8") if body is not None else None,
            headers=dict(headers or {}),
            timeout=self.timeout if self.timeout is not None else default_config.timeout,
        )
        return Response(status_code=resp.status_code, body=resp.text, headers=dict(resp.headers))

    def __init__(
        self,
        session: typing.Optional[requests.Session] = None,
        timeout: typing.Optional[float] = None,
    ):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
