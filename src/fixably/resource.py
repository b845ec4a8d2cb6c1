"""
:py:class:`Resource` is the base class of every Fixably resource type.

Synopsis
--------

.. code-block:: python

   from fixably import Customer, Scope

   customer = Customer.find(1)
   customer.first_name = "Jill"
   customer.save()

   for order in Order.where(is_draft=False).paginated_each():
       ...

"""
import typing
import urllib.parse

from .actions import Action, ActionPolicy
from .codec import Decoder, Encoder
from .collection import PaginatedCollection
from .connection import Connection, get_connection, response_code_allows_body
from .converters import default_converter
from .declarative import declare
from .exceptions import InvalidDeclarationError, ResourceInvalid, ValidationArgumentError
from .includes import IncludesBuilder
from .logger import get_logger
from .models import RelationshipType, ResourceDescriptor, ResourceRegistry, default_registry
from .query import PASSTHROUGH_PARAMETERS, QueryEncoder, Scope, ScopeType
from .transport import Response
from .utils import pluralize
from .validators import FiltersValidator

logger = get_logger(__name__)

R = typing.TypeVar("R", bound="Resource")

_INSTANCE_FIELDS = frozenset(["persisted", "parent_association", "prefix_options", "errors"])


class Resource:
    registry: typing.ClassVar[ResourceRegistry] = default_registry

    _attributes: typing.Dict[str, typing.Any]
    persisted: bool
    parent_association: typing.Optional[str]
    prefix_options: typing.Dict[str, typing.Any]
    errors: typing.List[str]

    def __init_subclass__(cls, **kwargs: typing.Any) -> None:
        super().__init_subclass__(**kwargs)  # type: ignore
        declare(cls, cls.registry)

    @classmethod
    def _require_subclass(cls, what: str) -> None:
        if cls is Resource:
            raise InvalidDeclarationError(f"{what} can only be called on a sub-class")

    @classmethod
    def descriptor(cls) -> ResourceDescriptor:
        cls._require_subclass("descriptor")
        return cls.registry.descriptor_for(cls)

    @classmethod
    def actions(cls) -> typing.Tuple[Action, ...]:
        cls._require_subclass("actions")
        return cls.descriptor().actions

    @classmethod
    def declare_actions(cls, values: typing.Any) -> typing.Tuple[Action, ...]:
        """
        Assigns the permitted actions of a type declared without ``Meta.actions``.
        Actions can be assigned only once.
        """
        cls._require_subclass("actions")
        return cls.registry.assign_actions(cls, values)

    @classmethod
    def encoder(cls) -> Encoder:
        encoder = cls.descriptor().encoder
        assert encoder is not None
        return encoder

    @classmethod
    def decoder(cls) -> Decoder:
        decoder = cls.descriptor().decoder
        assert decoder is not None
        return decoder

    @classmethod
    def connection(cls) -> Connection:
        return get_connection()

    @classmethod
    def split_prefix_options(
        cls, values: typing.Mapping[str, typing.Any]
    ) -> typing.Tuple[typing.Dict[str, typing.Any], typing.Dict[str, typing.Any]]:
        """
        Separates the ancestor identifiers (e.g. ``order_id`` for order notes) from the
        rest of ``values``.
        """
        param = cls.descriptor().prefix_parameter
        prefix_options: typing.Dict[str, typing.Any] = {}
        rest: typing.Dict[str, typing.Any] = {}
        for name, value in values.items():
            if name == param:
                prefix_options[name] = value
            else:
                rest[name] = value
        return prefix_options, rest

    @classmethod
    def site_path(
        cls, prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> str:
        descr = cls.descriptor()
        param = descr.prefix_parameter
        if param is None:
            return ""
        value = (prefix_options or {}).get(param)
        if value is None:
            raise ValidationArgumentError(f"{param} is required to address {descr.plural}")
        try:
            parent_plural = cls.registry.descriptor_for(
                cls.registry.class_for(descr.parents[0])
            ).plural
        except InvalidDeclarationError:
            parent_plural = pluralize(descr.parents[0])
        return f"/{parent_plural}/{urllib.parse.quote(str(value), safe='')}"

    @classmethod
    def collection_path(
        cls, prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> str:
        return f"{cls.site_path(prefix_options)}/{cls.descriptor().plural}"

    @classmethod
    def element_path(
        cls,
        id: typing.Any,
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> str:
        return f"{cls.collection_path(prefix_options)}/{urllib.parse.quote(str(id), safe='')}"

    @classmethod
    def fetch_collection(
        cls: typing.Type[R],
        query: typing.Mapping[str, str],
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        parent_resource: typing.Optional["Resource"] = None,
        parent_association: typing.Optional[str] = None,
        from_: typing.Optional[str] = None,
    ) -> PaginatedCollection[R]:
        query = dict(query)
        query.setdefault("expand", "items")
        path = from_ if from_ is not None else cls.collection_path(prefix_options)
        response = cls.connection().get(path, query)
        body = response.json() if response_code_allows_body(response.status_code) else None
        if body is None:
            return PaginatedCollection(
                cls,
                [],
                query=query,
                prefix_options=prefix_options,
                parent_resource=parent_resource,
                parent_association=parent_association,
            )
        return cls.decoder().decode_collection(
            cls,
            body,
            query=query,
            prefix_options=prefix_options,
            parent_resource=parent_resource,
            parent_association=parent_association,
        )

    @classmethod
    def fetch_one(
        cls: typing.Type[R],
        path: str,
        query: typing.Optional[typing.Mapping[str, str]] = None,
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> typing.Optional[R]:
        response = cls.connection().get(path, query)
        body = response.json() if response_code_allows_body(response.status_code) else None
        if body is None:
            return None
        return typing.cast(
            typing.Optional[R], cls.decoder().decode(cls, body, prefix_options=prefix_options)
        )

    @classmethod
    def find(
        cls, scope: ScopeType = None, from_: typing.Optional[str] = None, **kwargs: typing.Any
    ):
        """
        Fetches records.

        :param scope: :py:attr:`Scope.ALL` for a page of records, :py:attr:`Scope.FIRST` or
                      :py:attr:`Scope.LAST` for the first or last record of a page,
                      :py:attr:`Scope.ONE` for the record found at ``from_``, or the
                      identifier of a record.
        :param str from_: A custom path to fetch from.
        :param kwargs: Filters, ``limit``, ``offset``, ``expand`` and prefix options.
        :return: A :py:class:`PaginatedCollection` for :py:attr:`Scope.ALL`, otherwise
                 a record or :py:const:`None`.
        """
        if not isinstance(scope, Scope):
            ActionPolicy(cls).require(Action.SHOW)

        prefix_options, args = cls.split_prefix_options(kwargs)
        query = QueryEncoder(cls).encode(scope, args)

        if scope is Scope.ALL:
            return cls.fetch_collection(query, prefix_options, from_=from_)
        elif scope is Scope.FIRST:
            page = cls.fetch_collection(query, prefix_options, from_=from_)
            return page[0] if page else None
        elif scope is Scope.LAST:
            page = cls.fetch_collection(query, prefix_options, from_=from_)
            return page[-1] if page else None
        elif scope is Scope.ONE:
            if from_ is None:
                raise ValidationArgumentError("Scope.ONE requires a path given as from_")
            return cls.fetch_one(from_, query, prefix_options)
        elif scope is None:
            raise ValidationArgumentError("find requires a scope or an identifier")
        path = from_ if from_ is not None else cls.element_path(scope, prefix_options)
        return cls.fetch_one(path, query, prefix_options)

    @classmethod
    def all(cls: typing.Type[R], **kwargs: typing.Any) -> PaginatedCollection[R]:
        ActionPolicy(cls).require(Action.LIST)
        return cls.find(Scope.ALL, **kwargs)

    @classmethod
    def where(cls: typing.Type[R], **clauses: typing.Any) -> PaginatedCollection[R]:
        ActionPolicy(cls).require(Action.LIST)
        descr = cls.descriptor()
        if descr.permitted_filters is not None:
            _, filters = cls.split_prefix_options(clauses)
            for name in PASSTHROUGH_PARAMETERS:
                filters.pop(name, None)
            FiltersValidator(descr.permitted_filters, filters).validate()
        return cls.find(Scope.ALL, **clauses)

    @classmethod
    def first(cls: typing.Type[R], **kwargs: typing.Any) -> typing.Optional[R]:
        ActionPolicy(cls).require(Action.LIST)
        kwargs["limit"] = 1
        return cls.find(Scope.FIRST, **kwargs)

    @classmethod
    def last(cls: typing.Type[R], **kwargs: typing.Any) -> typing.Optional[R]:
        """
        Returns the last record of the collection. When the first page does not hold it,
        one more request fetches just that record.
        """
        ActionPolicy(cls).require(Action.LIST)
        prefix_options, args = cls.split_prefix_options(kwargs)
        query = QueryEncoder(cls).encode(Scope.LAST, args)
        page = cls.fetch_collection(query, prefix_options)
        if page.offset != 0 or page.total_items <= page.limit:
            return page[-1] if page else None

        # total_items of the second response is trusted as-is
        query = dict(page.query)
        query["limit"] = "1"
        query["offset"] = str(page.total_items - 1)
        tail = cls.fetch_collection(query, prefix_options)
        return tail[-1] if tail else None

    @classmethod
    def includes(cls, association: str) -> IncludesBuilder:
        return IncludesBuilder(cls).includes(association)

    @classmethod
    def create(
        cls: typing.Type[R],
        attributes: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        **kwargs: typing.Any,
    ) -> R:
        ActionPolicy(cls).require(Action.CREATE)
        instance = cls(attributes, **kwargs)
        instance.save()
        return instance

    @classmethod
    def create_or_raise(
        cls: typing.Type[R],
        attributes: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        **kwargs: typing.Any,
    ) -> R:
        ActionPolicy(cls).require(Action.CREATE)
        instance = cls(attributes, **kwargs)
        instance.save_or_raise()
        return instance

    @classmethod
    def delete(cls, id: typing.Any, **prefix_options: typing.Any) -> Response:
        ActionPolicy(cls).require(Action.DELETE)
        return cls.connection().delete(cls.element_path(id, prefix_options))

    @property
    def attributes(self) -> typing.Dict[str, typing.Any]:
        return self._attributes

    def is_new(self) -> bool:
        return not self.persisted

    def validate(self) -> typing.List[str]:
        """
        Returns the reasons the record cannot be saved, if any. Resource types override
        this to check their attributes before a request is made.
        """
        return []

    def is_valid(self) -> bool:
        self.errors = list(self.validate())
        return not self.errors

    def encode(self) -> typing.Dict[str, typing.Any]:
        return type(self).encoder().encode(self)

    def load_response(self, response: Response) -> None:
        if response_code_allows_body(response.status_code):
            body = response.json()
            if body is not None:
                type(self).decoder().load_body(self, body)
        if self["id"] is None:
            location = response.headers.get("Location") or response.headers.get("location")
            if location:
                self["id"] = self._id_from_location(location)

    @staticmethod
    def _id_from_location(location: str) -> typing.Any:
        last = urllib.parse.urlparse(location).path.rstrip("/").rsplit("/", 1)[-1]
        return int(last) if last.isdigit() else last

    def save(self, check_policy: bool = True) -> bool:
        """
        Creates the record when it is new and updates it otherwise.

        :param bool check_policy: Whether to check the resource type permits the action.
        :return: :py:const:`False` when the record is invalid, in which case nothing is sent.
        """
        if check_policy:
            ActionPolicy(self).require(Action.UPDATE if self.persisted else Action.CREATE)
        if not self.is_valid():
            logger.debug("not saving invalid %s: %s", type(self).__qualname__, self.errors)
            return False
        cls = type(self)
        conn = cls.connection()
        if self.persisted:
            response = conn.put(cls.element_path(self["id"], self.prefix_options), self.encode())
        else:
            response = conn.post(cls.collection_path(self.prefix_options), self.encode())
        self.load_response(response)
        self.persisted = True
        return True

    def save_or_raise(self) -> bool:
        ActionPolicy(self).require(Action.UPDATE if self.persisted else Action.CREATE)
        if not self.is_valid():
            raise ResourceInvalid(self.errors)
        return self.save(check_policy=False)

    def destroy(self) -> Response:
        ActionPolicy(self).require(Action.DELETE)
        cls = type(self)
        response = cls.connection().delete(cls.element_path(self["id"], self.prefix_options))
        self.persisted = False
        return response

    def reload(self: R) -> R:
        ActionPolicy(self).require(Action.SHOW)
        cls = type(self)
        query = QueryEncoder(cls).encode(self["id"])
        response = cls.connection().get(cls.element_path(self["id"], self.prefix_options), query)
        body = response.json() if response_code_allows_body(response.status_code) else None
        if body is not None:
            self._attributes.clear()
            cls.decoder().load_body(self, body)
        return self

    def _check_value(self, name: str, value: typing.Any) -> typing.Any:
        if value is None or name == "id":
            return value
        descr = type(self).descriptor()
        rel = descr.relationships.get(name)
        if rel is None:
            typ = descr.attributes[name].type
            if not default_converter.accepts(typ, value):
                raise TypeError(
                    f"{name} expects {getattr(typ, '__name__', typ)}, got {type(value).__name__}"
                )
            return value

        destination = rel.destination_class
        if rel.type is RelationshipType.HAS_ONE:
            if isinstance(value, typing.Mapping):
                return destination(value)
            elif isinstance(value, destination):
                return value
        else:
            if isinstance(value, PaginatedCollection):
                return value
            elif isinstance(value, (list, tuple)):
                items = [destination(v) if isinstance(v, typing.Mapping) else v for v in value]
                if all(isinstance(v, destination) for v in items):
                    return items
        raise TypeError(
            f"{name} expects {destination.__qualname__} records, got {type(value).__name__}"
        )

    def __getattr__(self, name: str) -> typing.Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self.__dict__["_attributes"][name]
        except KeyError:
            pass
        if type(self).descriptor().declares(name):
            return None
        raise AttributeError(f"{type(self).__qualname__} has no attribute {name!r}")

    def __setattr__(self, name: str, value: typing.Any) -> None:
        if name in _INSTANCE_FIELDS or name.startswith("_"):
            object.__setattr__(self, name, value)
        elif type(self).descriptor().declares(name):
            self._attributes[name] = self._check_value(name, value)
        elif hasattr(type(self), name):
            object.__setattr__(self, name, value)
        else:
            raise AttributeError(
                f"{type(self).__qualname__} does not declare {name!r}; "
                f"use item access for undeclared keys"
            )

    def __delattr__(self, name: str) -> None:
        if type(self).descriptor().declares(name):
            self._attributes.pop(name, None)
        else:
            object.__delattr__(self, name)

    def __getitem__(self, key: str) -> typing.Any:
        return self._attributes.get(key)

    def __setitem__(self, key: str, value: typing.Any) -> None:
        self._attributes[key] = value

    def __delitem__(self, key: str) -> None:
        del self._attributes[key]

    def __contains__(self, key: object) -> bool:
        return key in self._attributes

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if type(other) is not type(self):
            return NotImplemented
        assert isinstance(other, Resource)
        return self.persisted and other.persisted and self["id"] == other["id"]

    def __hash__(self) -> int:
        return hash((type(self), self["id"])) if self["id"] is not None else id(self)

    def __repr__(self) -> str:
        return f"<{type(self).__qualname__} {self._attributes!r}>"

    def __init__(
        self,
        attributes: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        persisted: bool = False,
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        **kwargs: typing.Any,
    ):
        type(self)._require_subclass("Resource()")
        self._attributes = {}
        self.persisted = persisted
        self.parent_association = None
        self.errors = []
        values = dict(attributes or {})
        values.update(kwargs)
        prefix, values = type(self).split_prefix_options(values)
        self.prefix_options = dict(prefix_options or {})
        self.prefix_options.update(prefix)
        descr = type(self).descriptor()
        for name, value in values.items():
            if descr.declares(name):
                setattr(self, name, value)
            else:
                self[name] = value
