import collections
import dataclasses
import datetime
import json
import typing
import urllib.parse

from ..resource import Resource
from ..transport import Response, Transport

SITE = "https://demo.fixably.com/api/v3"


@dataclasses.dataclass
class RecordedRequest:
    method: str
    url: str
    body: typing.Optional[str]
    headers: typing.Mapping[str, str]

    @property
    def path(self) -> str:
        return self.url.split("?", 1)[0]

    @property
    def params(self) -> typing.Dict[str, str]:
        _, _, query = self.url.partition("?")
        return dict(urllib.parse.parse_qsl(query, keep_blank_values=True))

    def json(self) -> typing.Any:
        return json.loads(self.body) if self.body is not None else None


class RecordingTransport(Transport):
    """
    Replays queued responses in order and records every request it receives.
    """

    requests: typing.List[RecordedRequest]
    responses: typing.Deque[Response]

    def queue(
        self,
        body: typing.Any = None,
        status_code: int = 200,
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> "RecordingTransport":
        self.responses.append(
            Response(
                status_code=status_code,
                body=json.dumps(body) if body is not None else "",
                headers=dict(headers or {}),
            )
        )
        return self

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]

    def request(
        self,
        method: str,
        url: str,
        body: typing.Optional[str] = None,
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ) -> Response:
        self.requests.append(RecordedRequest(method, url, body, dict(headers or {})))
        if not self.responses:
            raise AssertionError(f"unexpected request: {method} {url}")
        return self.responses.popleft()

    def __init__(self):
        self.requests = []
        self.responses = collections.deque()


def envelope(
    items: typing.Sequence[typing.Any],
    limit: int = 25,
    offset: int = 0,
    total_items: typing.Optional[int] = None,
) -> typing.Dict[str, typing.Any]:
    return {
        "limit": limit,
        "offset": offset,
        "totalItems": len(items) if total_items is None else total_items,
        "items": list(items),
    }


class Widget(Resource):
    class Meta:
        actions = ["create", "delete", "list", "show", "update"]
        attributes = {
            "name": str,
            "size": int,
            "released_on": datetime.date,
            "active": bool,
        }
        has_one = {"maker": "gadget"}
        has_many = {"parts": "widget/part"}
        remove_on_encode = ["secret"]

    class Part(Resource):
        class Meta:
            actions = ["create", "list", "show"]
            attributes = {"label": str}

        class Screw(Resource):
            class Meta:
                actions = ["create"]


class Gadget(Resource):
    class Meta:
        actions = []
        attributes = {"title": str}
