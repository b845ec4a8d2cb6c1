import enum
import typing
from collections import OrderedDict

from .actions import Action, format_actions
from .exceptions import InvalidDeclarationError
from .utils import pluralize

if typing.TYPE_CHECKING:
    from .codec import Decoder, Encoder  # noqa: F401


class RelationshipType(enum.Enum):
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"


class ResourceMemberDescriptor:
    parent: typing.Optional["ResourceDescriptor"] = None
    name: str

    T = typing.TypeVar("T", bound="ResourceMemberDescriptor")

    def bind(self: T, parent: "ResourceDescriptor") -> T:
        self.parent = parent
        return self


class ResourceAttributeDescriptor(ResourceMemberDescriptor):
    type: typing.Optional[typing.Type]
    """
    The Python type values are converted to, or :py:const:`None` to keep wire values as-is.
    """

    def __init__(self, name: str, type: typing.Optional[typing.Type] = None):
        self.name = name
        self.type = type


class ResourceRelationshipDescriptor(ResourceMemberDescriptor):
    type: RelationshipType
    registry: "ResourceRegistry"
    _destination: typing.Union[str, typing.Type]

    @property
    def destination_class(self) -> typing.Type:
        """
        The resource class on the other side of the association. Destinations declared by
        key are looked up lazily so that declarations may refer to each other in any order.
        """
        if isinstance(self._destination, str):
            return self.registry.class_for(self._destination)
        return self._destination

    @property
    def destination(self) -> "ResourceDescriptor":
        return self.registry.descriptor_for(self.destination_class)

    def clone(self: "ResourceRelationshipDescriptor") -> "ResourceRelationshipDescriptor":
        return type(self)(self._destination, self.name, self.registry)

    def __init__(
        self,
        destination: typing.Union[str, typing.Type],
        name: str,
        registry: typing.Optional["ResourceRegistry"] = None,
    ):
        self._destination = destination
        self.name = name
        self.registry = registry if registry is not None else default_registry


class HasOneDescriptor(ResourceRelationshipDescriptor):
    type = RelationshipType.HAS_ONE


class HasManyDescriptor(ResourceRelationshipDescriptor):
    type = RelationshipType.HAS_MANY


class ResourceDescriptor:
    """
    A :py:class:`ResourceDescriptor` holds what is declared about a Fixably resource type.

    :param str name: The underscored name of the resource, e.g. ``billing_address``.
    :param Sequence[str] parents: The names of the enclosing resources, outermost first.
    :param Iterable[ResourceAttributeDescriptor] attributes: The declared scalar attributes.
    :param Iterable[ResourceRelationshipDescriptor] relationships: The declared associations.
    """

    name: str
    parents: typing.Tuple[str, ...]
    plural: str
    actions: typing.Tuple[Action, ...] = ()
    remove_on_encode: typing.FrozenSet[str]
    write_has_many: typing.FrozenSet[str]
    permitted_filters: typing.Optional[typing.Mapping[str, typing.Mapping[str, typing.Any]]]
    encoder: typing.Optional["Encoder"]
    decoder: typing.Optional["Decoder"]
    _attributes: typing.MutableMapping[str, ResourceAttributeDescriptor]
    _relationships: typing.MutableMapping[str, ResourceRelationshipDescriptor]

    @property
    def attributes(self) -> typing.Mapping[str, ResourceAttributeDescriptor]:
        return self._attributes

    @property
    def relationships(self) -> typing.Mapping[str, ResourceRelationshipDescriptor]:
        return self._relationships

    @property
    def has_one(self) -> typing.Mapping[str, ResourceRelationshipDescriptor]:
        return OrderedDict(
            (k, v) for k, v in self._relationships.items() if v.type is RelationshipType.HAS_ONE
        )

    @property
    def has_many(self) -> typing.Mapping[str, ResourceRelationshipDescriptor]:
        return OrderedDict(
            (k, v) for k, v in self._relationships.items() if v.type is RelationshipType.HAS_MANY
        )

    @property
    def path(self) -> typing.Tuple[str, ...]:
        return self.parents + (self.name,)

    @property
    def key(self) -> str:
        return "/".join(self.path)

    @property
    def nesting_depth(self) -> int:
        return len(self.parents)

    @property
    def parent_key(self) -> typing.Optional[str]:
        return "/".join(self.parents) if self.parents else None

    @property
    def prefix_parameter(self) -> typing.Optional[str]:
        """
        The prefix option carrying the identifier of the outermost parent, e.g. ``order_id``
        for order notes. Root-level resources have none.
        """
        if not self.parents:
            return None
        return f"{self.parents[0]}_id"

    def declares(self, name: str) -> bool:
        return name == "id" or name in self._attributes or name in self._relationships

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key!r})"

    def __init__(
        self,
        name: str,
        parents: typing.Sequence[str] = (),
        attributes: typing.Iterable[ResourceAttributeDescriptor] = (),
        relationships: typing.Iterable[ResourceRelationshipDescriptor] = (),
        plural: typing.Optional[str] = None,
        remove_on_encode: typing.Iterable[str] = (),
        write_has_many: typing.Iterable[str] = (),
        permitted_filters: typing.Optional[
            typing.Mapping[str, typing.Mapping[str, typing.Any]]
        ] = None,
        encoder: typing.Optional["Encoder"] = None,
        decoder: typing.Optional["Decoder"] = None,
    ) -> None:
        self.name = name
        self.parents = tuple(parents)
        self.plural = plural if plural is not None else pluralize(name)
        self.remove_on_encode = frozenset(remove_on_encode)
        self.write_has_many = frozenset(write_has_many)
        self.permitted_filters = permitted_filters
        self.encoder = encoder
        self.decoder = decoder
        self._attributes = OrderedDict((attr.name, attr.bind(self)) for attr in attributes)
        self._relationships = OrderedDict((rel.name, rel.bind(self)) for rel in relationships)
        for assoc in self.write_has_many:
            if assoc not in self.has_many:
                raise InvalidDeclarationError(
                    f"{assoc} is listed in write_has_many but is not a has_many association"
                )


class ResourceRegistry:
    """
    Keeps the declared resource types, keyed on class identity, and their permitted actions.
    """

    _descriptors: typing.Dict[typing.Type, ResourceDescriptor]
    _classes: typing.Dict[str, typing.Type]
    _actions_assigned: typing.Set[typing.Type]

    def register(self, class_: typing.Type, descr: ResourceDescriptor) -> None:
        if class_ in self._descriptors:
            raise InvalidDeclarationError(f"{class_.__qualname__} is already registered")
        self._descriptors[class_] = descr
        self._classes[descr.key] = class_

    def is_registered(self, class_: typing.Type) -> bool:
        return class_ in self._descriptors

    def descriptor_for(self, class_: typing.Type) -> ResourceDescriptor:
        try:
            return self._descriptors[class_]
        except KeyError:
            raise InvalidDeclarationError(
                f"{class_.__qualname__} is not a declared resource"
            ) from None

    def class_for(self, key: str) -> typing.Type:
        try:
            return self._classes[key]
        except KeyError:
            raise InvalidDeclarationError(f'no resource known as "{key}"') from None

    def assign_actions(self, class_: typing.Type, values: typing.Any) -> typing.Tuple[Action, ...]:
        descr = self.descriptor_for(class_)
        if class_ in self._actions_assigned:
            raise InvalidDeclarationError(
                f"actions have already been declared for {class_.__qualname__}"
            )
        descr.actions = format_actions(values)
        self._actions_assigned.add(class_)
        return descr.actions

    def __init__(self):
        self._descriptors = {}
        self._classes = {}
        self._actions_assigned = set()


default_registry = ResourceRegistry()
