"""
Builds :py:class:`fixably.models.ResourceDescriptor` objects from the inner ``Meta`` class
of a resource declaration.

.. code-block:: python

   class Order(Resource):
       class Meta:
           actions = ["create", "list", "show"]
           attributes = {"reference": str, "is_draft": bool}
           has_one = {"customer": "customer"}
           has_many = {"notes": "order/note"}

       class Note(Resource):
           class Meta:
               actions = ["create", "list", "show"]
               attributes = {"title": str, "text": str, "type": str}

"""
import collections.abc
import dataclasses
import re
import typing

from .codec import Decoder, DefaultDecoderImpl, DefaultEncoderImpl, Encoder
from .exceptions import InvalidDeclarationError
from .models import (
    HasManyDescriptor,
    HasOneDescriptor,
    ResourceAttributeDescriptor,
    ResourceDescriptor,
    ResourceRegistry,
)
from .utils import underscore

AttributesType = typing.Union[
    typing.Mapping[str, typing.Optional[typing.Type]],
    typing.Sequence[str],
]
AssociationsType = typing.Mapping[str, typing.Union[str, typing.Type]]

_LOCALS_MARKER = re.compile(r"^.*<locals>\.")


@dataclasses.dataclass
class Meta:
    name: typing.Optional[str] = None
    parent: typing.Optional[str] = None
    plural: typing.Optional[str] = None
    actions: typing.Any = None
    attributes: typing.Optional[AttributesType] = None
    has_one: typing.Optional[AssociationsType] = None
    has_many: typing.Optional[AssociationsType] = None
    remove_on_encode: typing.Optional[typing.Sequence[str]] = None
    write_has_many: typing.Optional[typing.Sequence[str]] = None
    permitted_filters: typing.Optional[typing.Mapping[str, typing.Mapping[str, typing.Any]]] = None
    encoder: typing.Optional[Encoder] = None
    decoder: typing.Optional[Decoder] = None
    abstract: bool = False


META_OPTIONS = frozenset(f.name for f in dataclasses.fields(Meta))


def handle_meta(meta: typing.Optional[typing.Type]) -> Meta:
    if meta is None:
        return Meta()
    attrs = {k: v for k, v in vars(meta).items() if not k.startswith("__")}
    unknown = sorted(set(attrs) - META_OPTIONS)
    if unknown:
        raise InvalidDeclarationError(f"unknown Meta options: {', '.join(unknown)}")
    return Meta(**attrs)


def resource_path(class_: typing.Type, meta: Meta) -> typing.Tuple[typing.Tuple[str, ...], str]:
    """
    Returns the names of the enclosing resources and the name of the resource itself.
    Unless ``Meta`` tells otherwise, both are derived from the class's qualified name,
    so ``Order.Note`` becomes ``(("order",), "note")``.
    """
    segments = _LOCALS_MARKER.sub("", class_.__qualname__).split(".")
    name = meta.name if meta.name is not None else underscore(segments[-1])
    if meta.parent is not None:
        parents = tuple(p for p in meta.parent.split("/") if p)
    else:
        parents = tuple(underscore(s) for s in segments[:-1])
    return parents, name


def build_attributes(
    attributes: typing.Optional[AttributesType],
) -> typing.List[ResourceAttributeDescriptor]:
    if attributes is None:
        return []
    elif isinstance(attributes, collections.abc.Mapping):
        return [ResourceAttributeDescriptor(name, typ) for name, typ in attributes.items()]
    elif isinstance(attributes, collections.abc.Sequence) and not isinstance(attributes, str):
        return [ResourceAttributeDescriptor(name) for name in attributes]
    raise InvalidDeclarationError("Meta.attributes must be a mapping or a sequence of names")


def build_descriptor(
    class_: typing.Type,
    meta: Meta,
    registry: ResourceRegistry,
    base: typing.Optional[ResourceDescriptor] = None,
) -> ResourceDescriptor:
    """
    Builds the descriptor of ``class_``. Attributes, associations and codec settings
    not given in ``meta`` are inherited from ``base``, the descriptor of the nearest
    declared ancestor; the name, the parents and the actions never are.
    """
    parents, name = resource_path(class_, meta)

    attributes: typing.Dict[str, ResourceAttributeDescriptor] = {}
    relationships: typing.Dict[str, typing.Any] = {}
    if base is not None:
        for attr in base.attributes.values():
            attributes[attr.name] = ResourceAttributeDescriptor(attr.name, attr.type)
        for rel in base.relationships.values():
            relationships[rel.name] = rel.clone()

    for attr in build_attributes(meta.attributes):
        attributes[attr.name] = attr
    for rel_name, destination in (meta.has_one or {}).items():
        relationships[rel_name] = HasOneDescriptor(destination, rel_name, registry)
    for rel_name, destination in (meta.has_many or {}).items():
        relationships[rel_name] = HasManyDescriptor(destination, rel_name, registry)

    overlap = set(attributes) & set(relationships)
    if overlap:
        raise InvalidDeclarationError(
            f"{', '.join(sorted(overlap))} declared both as attributes and as associations"
        )

    def inherited(value: typing.Any, attr: str, default: typing.Any) -> typing.Any:
        if value is not None:
            return value
        return getattr(base, attr) if base is not None else default

    return ResourceDescriptor(
        name=name,
        parents=parents,
        attributes=attributes.values(),
        relationships=relationships.values(),
        plural=meta.plural,
        remove_on_encode=inherited(meta.remove_on_encode, "remove_on_encode", ()),
        write_has_many=inherited(meta.write_has_many, "write_has_many", ()),
        permitted_filters=inherited(meta.permitted_filters, "permitted_filters", None),
        encoder=inherited(meta.encoder, "encoder", None) or DefaultEncoderImpl(),
        decoder=inherited(meta.decoder, "decoder", None) or DefaultDecoderImpl(),
    )


def declare(class_: typing.Type, registry: ResourceRegistry) -> typing.Optional[ResourceDescriptor]:
    """
    Registers ``class_`` according to its own inner ``Meta`` class and assigns its actions.
    Returns :py:const:`None` for abstract declarations, which are not registered.
    """
    meta = handle_meta(class_.__dict__.get("Meta"))
    if meta.abstract:
        return None
    base: typing.Optional[ResourceDescriptor] = None
    for ancestor in class_.__mro__[1:]:
        if registry.is_registered(ancestor):
            base = registry.descriptor_for(ancestor)
            break
    descr = build_descriptor(class_, meta, registry, base)
    registry.register(class_, descr)
    if meta.actions is not None:
        registry.assign_actions(class_, meta.actions)
    return descr
