import datetime
import enum
import typing
from collections import OrderedDict

from .exceptions import RangeFilterError, UnknownAssociationError, ValidationArgumentError
from .models import RelationshipType
from .utils import camelize

if typing.TYPE_CHECKING:
    from .resource import Resource  # noqa: F401


class Scope(enum.Enum):
    ALL = "all"
    FIRST = "first"
    LAST = "last"
    ONE = "one"


COLLECTION_SCOPES = frozenset([Scope.ALL, Scope.FIRST, Scope.LAST])

PASSTHROUGH_PARAMETERS = ("limit", "offset", "page", "expand")

RAW_FILTER_PARAMETER = "q"

ScopeType = typing.Union[Scope, int, str, None]


def stringify(value: typing.Any) -> str:
    if value is None:
        return ""
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, (datetime.datetime, datetime.date)):
        return value.strftime("%Y-%m-%d")
    elif isinstance(value, enum.Enum):
        return stringify(value.value)
    return str(value)


def format_range(name: str, values: typing.Sequence[typing.Any]) -> str:
    """
    Renders a ranged search as ``[from,to]``. A single value leaves the upper bound open.

    :param str name: The filter the range belongs to, used when reporting a malformed range.
    :param Sequence values: One or two bounds.
    :raises RangeFilterError: When ``values`` holds neither one nor two bounds.
    """
    if len(values) not in (1, 2):
        raise RangeFilterError(name, len(values))
    lower, upper = (list(values) + [None])[:2]
    return f"[{stringify(lower)},{stringify(upper)}]"


def is_collection_scope(scope: ScopeType) -> bool:
    return isinstance(scope, Scope) and scope in COLLECTION_SCOPES


class QueryEncoder:
    """
    A :py:class:`QueryEncoder` turns the keyword arguments of a finder call into the
    query parameters Fixably understands: filters are folded into the single ``q``
    parameter and associations to expand into ``expand``.

    :param resource_class: The :py:class:`fixably.resource.Resource` subclass being queried.
    """

    resource_class: typing.Type["Resource"]

    def expand_association(self, name: str) -> str:
        descr = self.resource_class.descriptor()
        try:
            rel = descr.relationships[name]
        except KeyError:
            raise UnknownAssociationError(self.resource_class.__qualname__, name) from None
        if rel.type is RelationshipType.HAS_MANY:
            return f"{camelize(name)}(items)"
        return camelize(name)

    def expand_associations(
        self, scope: ScopeType, expand: typing.Any
    ) -> typing.Optional[str]:
        if isinstance(expand, str):
            return expand

        names: typing.List[str] = []
        for name in expand or ():
            expanded = self.expand_association(name)
            if expanded not in names:
                names.append(expanded)

        if is_collection_scope(scope):
            return f"items({','.join(names)})" if names else "items"
        elif scope is Scope.ONE or scope is None or isinstance(scope, (int, str)):
            return ",".join(names) if names else None
        raise ValidationArgumentError(f"Unknown scope: {scope!r}")

    def encode_filters(self, filters: typing.Mapping[str, typing.Any]) -> typing.Optional[str]:
        terms: typing.List[str] = []
        for name, value in filters.items():
            if name == RAW_FILTER_PARAMETER:
                if value is not None and value != "":
                    terms.insert(0, str(value))
                continue
            if isinstance(value, (list, tuple)):
                rendered = format_range(name, value)
            else:
                rendered = stringify(value)
            terms.append(f"{camelize(name)}:{rendered}")
        return ",".join(terms) if terms else None

    def encode(
        self, scope: ScopeType, args: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> typing.Dict[str, str]:
        """
        Builds the wire query parameters for ``scope``.

        :param scope: A :py:class:`Scope` member, a record identifier, or :py:const:`None`.
        :param Mapping args: Filters, pagination overrides and ``expand``.
        :return: The query parameters, every value rendered as a string.
        """
        if isinstance(scope, bool):
            raise ValidationArgumentError(f"Unknown scope: {scope!r}")

        args = dict(args or {})
        params: typing.Dict[str, str] = OrderedDict()

        expand = self.expand_associations(scope, args.pop("expand", None))

        for name in PASSTHROUGH_PARAMETERS:
            if name in args:
                value = args.pop(name)
                if value is not None:
                    params[name] = stringify(value)

        q = self.encode_filters(args)
        if q is not None:
            params[RAW_FILTER_PARAMETER] = q
        if expand is not None:
            params["expand"] = expand
        return params

    def __init__(self, resource_class: typing.Type["Resource"]):
        self.resource_class = resource_class
