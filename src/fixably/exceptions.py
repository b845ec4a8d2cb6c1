import abc
import typing

from .utils import english_enumerate


class FixablyError(Exception, metaclass=abc.ABCMeta):
    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""

    def __str__(self):
        return self.message


class InvalidDeclarationError(FixablyError):
    pass


class ConfigurationError(FixablyError):
    name: str

    @property
    def message(self) -> str:
        return (
            f"{self.name} is required but hasn't been set.\n"
            f'fixably.configure({self.name}="value")'
        )

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name


class PermissionDenied(FixablyError):
    resource_name: str
    verb: str

    @property
    def message(self) -> str:
        return f"Fixably does not support {self.verb} {self.resource_name}"

    def __init__(self, resource_name: str, verb: str):
        super().__init__(resource_name, verb)
        self.resource_name = resource_name
        self.verb = verb


class ValidationArgumentError(FixablyError, ValueError):
    pass


class RangeFilterError(ValidationArgumentError):
    name: str
    length: int

    @property
    def message(self) -> str:
        return (
            "Ranged searches should have either 1 or 2 values but "
            f"{self.name} has {self.length}"
        )

    def __init__(self, name: str, length: int):
        super().__init__(name, length)
        self.name = name
        self.length = length


class UnknownAssociationError(ValidationArgumentError):
    resource_name: str
    name: str

    @property
    def message(self) -> str:
        return f"{self.name} is not a known association of {self.resource_name}"

    def __init__(self, resource_name: str, name: str):
        super().__init__(resource_name, name)
        self.resource_name = resource_name
        self.name = name


class StructuralError(FixablyError):
    pass


class RecordTypeMismatchError(StructuralError, TypeError):
    expected: str

    @property
    def message(self) -> str:
        return f"Appended record must be an instance of {self.expected}"

    def __init__(self, expected: str):
        super().__init__(expected)
        self.expected = expected


class EndOfSequence(FixablyError):
    @property
    def message(self) -> str:
        return "There are no more pages"


class ResponseShapeError(FixablyError):
    pass


class ResourceInvalid(FixablyError):
    errors: typing.Sequence[str]

    @property
    def message(self) -> str:
        return f"Validation failed: {english_enumerate(self.errors)}"

    def __init__(self, errors: typing.Sequence[str]):
        super().__init__(errors)
        self.errors = errors


class ConnectionError(FixablyError):
    status_code: int
    url: str
    body: str

    @property
    def message(self) -> str:
        return f"Failed with {self.status_code} at {self.url}"

    def __init__(self, status_code: int, url: str, body: str = ""):
        super().__init__(status_code, url)
        self.status_code = status_code
        self.url = url
        self.body = body


class Redirection(ConnectionError):
    pass


class ClientError(ConnectionError):
    pass


class BadRequest(ClientError):
    pass


class UnauthorizedAccess(ClientError):
    pass


class ForbiddenAccess(ClientError):
    pass


class ResourceNotFound(ClientError):
    pass


class MethodNotAllowed(ClientError):
    pass


class ResourceConflict(ClientError):
    pass


class ResourceGone(ClientError):
    pass


class UnprocessableEntity(ClientError):
    pass


class ServerError(ConnectionError):
    pass
