import typing

from .exceptions import UnknownAssociationError
from .logger import get_logger
from .query import ScopeType

if typing.TYPE_CHECKING:
    from .collection import PaginatedCollection  # noqa: F401
    from .resource import Resource  # noqa: F401

logger = get_logger(__name__)


class IncludesBuilder:
    """
    Accumulates associations to be expanded by the next finder call.

    .. code-block:: python

       Order.includes("notes").includes("customer").find(1)

    :param resource_class: The :py:class:`fixably.resource.Resource` subclass to query.
    """

    resource_class: typing.Type["Resource"]
    associations: typing.List[str]

    def includes(self, association: str) -> "IncludesBuilder":
        if association not in self.resource_class.descriptor().relationships:
            raise UnknownAssociationError(self.resource_class.__qualname__, association)
        if association not in self.associations:
            self.associations.append(association)
        return self

    def merge_expand(self, args: typing.Dict[str, typing.Any]) -> typing.Dict[str, typing.Any]:
        expand = args.get("expand")
        if isinstance(expand, str):
            if self.associations:
                logger.warning(
                    "expand was given as a literal string; ignoring included associations %s",
                    ", ".join(self.associations),
                )
            return args
        merged = list(expand or ())
        for name in self.associations:
            if name not in merged:
                merged.append(name)
        args["expand"] = merged
        return args

    def find(self, scope: ScopeType, **kwargs: typing.Any) -> typing.Any:
        return self.resource_class.find(scope, **self.merge_expand(kwargs))

    def first(self, **kwargs: typing.Any) -> typing.Optional["Resource"]:
        return self.resource_class.first(**self.merge_expand(kwargs))

    def last(self, **kwargs: typing.Any) -> typing.Optional["Resource"]:
        return self.resource_class.last(**self.merge_expand(kwargs))

    def all(self, **kwargs: typing.Any) -> "PaginatedCollection":
        return self.resource_class.all(**self.merge_expand(kwargs))

    def where(self, **clauses: typing.Any) -> "PaginatedCollection":
        return self.resource_class.where(**self.merge_expand(clauses))

    def __init__(self, resource_class: typing.Type["Resource"]):
        self.resource_class = resource_class
        self.associations = []
