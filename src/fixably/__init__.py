from .exceptions import (  # noqa
    BadRequest,
    ClientError,
    ConfigurationError,
    ConnectionError,
    EndOfSequence,
    FixablyError,
    ForbiddenAccess,
    InvalidDeclarationError,
    MethodNotAllowed,
    PermissionDenied,
    RangeFilterError,
    RecordTypeMismatchError,
    Redirection,
    ResourceConflict,
    ResourceGone,
    ResourceInvalid,
    ResourceNotFound,
    ResponseShapeError,
    ServerError,
    StructuralError,
    UnauthorizedAccess,
    UnknownAssociationError,
    UnprocessableEntity,
    ValidationArgumentError,
)
from .config import Config, config, configure  # noqa
from .logger import get_logger, init_logging  # noqa
from .resource import Resource  # noqa
from .actions import Action, ActionPolicy  # noqa
from .collection import PaginatedCollection  # noqa
from .query import Scope  # noqa
from .transport import RequestsTransport, Response, Transport  # noqa
from .connection import Connection, use_transport  # noqa
from .resources import (  # noqa
    Customer,
    CustomerChild,
    Device,
    Location,
    Order,
    Queue,
    Status,
    User,
)
