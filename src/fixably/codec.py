"""
This module contains the interfaces that turn Fixably's wire representation into
resource instances and back, and their default implementations.

"""
import abc
import typing

from .converters import BasicTypeConverter, default_converter
from .exceptions import ResponseShapeError
from .models import RelationshipType, ResourceRelationshipDescriptor
from .utils import camelize, deep_transform_keys, underscore

ENVELOPE_KEYS = frozenset(["limit", "offset", "total_items", "items"])
REFERENCE_LINK_KEY = "href"
EXCLUDED_ON_ENCODE = ("created_at", REFERENCE_LINK_KEY)


def is_envelope(value: typing.Any) -> bool:
    return isinstance(value, typing.Mapping) and ENVELOPE_KEYS.issubset(value.keys())


def is_stub(value: typing.Any) -> bool:
    """
    Tells whether ``value`` is an association that was not expanded, i.e. an object
    holding nothing but a reference link.
    """
    return isinstance(value, typing.Mapping) and list(value.keys()) == [REFERENCE_LINK_KEY]


def unwrap_array(body: typing.Any) -> typing.Optional[typing.Mapping[str, typing.Any]]:
    if isinstance(body, typing.Mapping):
        return body
    elif isinstance(body, list):
        if len(body) > 1:
            raise ResponseShapeError("Unable to unpack an array response with more than 1 record")
        return body[0] if body else None
    raise ResponseShapeError(f"Unable to decode a response of type {type(body).__name__}")


class Decoder(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def decode(
        self,
        resource_class: typing.Type["resource_module.Resource"],
        body: typing.Any,
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> typing.Optional["resource_module.Resource"]:
        """
        Builds a persisted instance of ``resource_class`` from a response body.

        :param resource_class: The type of the record.
        :param Any body: The parsed JSON body, an object or an array of at most one object.
        :param Mapping prefix_options: The ancestor identifiers the record was addressed with.
        :return: The instance, or :py:const:`None` when the body is an empty array.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def decode_collection(
        self,
        resource_class: typing.Type["resource_module.Resource"],
        body: typing.Any,
        query: typing.Optional[typing.Mapping[str, str]] = None,
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        parent_resource: typing.Optional["resource_module.Resource"] = None,
        parent_association: typing.Optional[str] = None,
    ) -> "collection_module.PaginatedCollection":
        """
        Builds a :py:class:`fixably.collection.PaginatedCollection` from an envelope.

        :param query: The query parameters that produced the page, replayed on navigation.
        :param parent_resource: The owner when the envelope is a nested has-many association.
        :param parent_association: The association name on ``parent_resource``.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def load(
        self, instance: "resource_module.Resource", attributes: typing.Mapping[str, typing.Any]
    ) -> "resource_module.Resource":
        """
        Merges the underscored ``attributes`` into ``instance``, hydrating its associations.
        """
        ...  # pragma: nocover

    def load_body(
        self, instance: "resource_module.Resource", body: typing.Any
    ) -> "resource_module.Resource":
        attributes = unwrap_array(body)
        if attributes is not None:
            self.load(instance, deep_transform_keys(attributes, underscore))
        return instance


class Encoder(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def encode(self, instance: "resource_module.Resource") -> typing.Dict[str, typing.Any]:
        """
        Builds the camel-cased payload sent when ``instance`` is created or updated.
        """
        ...  # pragma: nocover


class DefaultDecoderImpl(Decoder):
    converter: BasicTypeConverter

    def decode(
        self,
        resource_class: typing.Type["resource_module.Resource"],
        body: typing.Any,
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> typing.Optional["resource_module.Resource"]:
        if unwrap_array(body) is None:
            return None
        return self.load_body(resource_class(persisted=True, prefix_options=prefix_options), body)

    def decode_collection(
        self,
        resource_class: typing.Type["resource_module.Resource"],
        body: typing.Any,
        query: typing.Optional[typing.Mapping[str, str]] = None,
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        parent_resource: typing.Optional["resource_module.Resource"] = None,
        parent_association: typing.Optional[str] = None,
    ) -> "collection_module.PaginatedCollection":
        envelope = deep_transform_keys(body, underscore)
        if not is_envelope(envelope):
            raise ResponseShapeError("Expected a paginated collection in the response")
        items = [
            self.load(resource_class(persisted=True, prefix_options=prefix_options), item)
            for item in envelope["items"]
        ]
        return collection_module.PaginatedCollection(
            resource_class,
            items,
            limit=envelope["limit"],
            offset=envelope["offset"],
            total_items=envelope["total_items"],
            query=query,
            prefix_options=prefix_options,
            parent_resource=parent_resource,
            parent_association=parent_association,
        )

    def _nested_prefix_options(
        self, instance: "resource_module.Resource", rel: ResourceRelationshipDescriptor
    ) -> typing.Dict[str, typing.Any]:
        param = rel.destination.prefix_parameter
        if param is None or instance["id"] is None:
            return {}
        return {param: instance["id"]}

    def load_has_many(
        self,
        instance: "resource_module.Resource",
        rel: ResourceRelationshipDescriptor,
        value: typing.Any,
    ) -> typing.Any:
        if is_stub(value):
            return collection_module.PaginatedCollection.empty(
                rel.destination_class, parent_resource=instance, parent_association=rel.name
            )
        elif is_envelope(value):
            return self.decode_collection(
                rel.destination_class,
                value,
                prefix_options=self._nested_prefix_options(instance, rel),
                parent_resource=instance,
                parent_association=rel.name,
            )
        elif isinstance(value, list):
            prefix_options = self._nested_prefix_options(instance, rel)
            return [
                self.load(rel.destination_class(persisted=True, prefix_options=prefix_options), v)
                if isinstance(v, typing.Mapping)
                else v
                for v in value
            ]
        return value

    def load_has_one(
        self,
        instance: "resource_module.Resource",
        rel: ResourceRelationshipDescriptor,
        value: typing.Any,
    ) -> typing.Any:
        if isinstance(value, typing.Mapping):
            return self.load(rel.destination_class(persisted=True), value)
        return value

    def load(
        self, instance: "resource_module.Resource", attributes: typing.Mapping[str, typing.Any]
    ) -> "resource_module.Resource":
        descr = type(instance).descriptor()
        # identifiers first, nested collections are addressed through them
        if "id" in attributes:
            instance["id"] = attributes["id"]
        for name, value in attributes.items():
            attr = descr.attributes.get(name)
            rel = descr.relationships.get(name)
            if rel is not None:
                if rel.type is RelationshipType.HAS_ONE and is_stub(value):
                    instance.attributes.pop(name, None)
                    continue
                elif rel.type is RelationshipType.HAS_MANY:
                    value = self.load_has_many(instance, rel, value)
                else:
                    value = self.load_has_one(instance, rel, value)
            elif attr is not None:
                value = self.converter.convert_from_wire_value(attr.type, value)
            instance[name] = value
        return instance

    def __init__(self, converter: BasicTypeConverter = default_converter):
        self.converter = converter


class DefaultEncoderImpl(Encoder):
    converter: BasicTypeConverter

    def to_wire_value(self, value: typing.Any) -> typing.Any:
        if isinstance(value, resource_module.Resource):
            return self.encode_nested(value)
        elif isinstance(value, typing.Mapping):
            return {k: self.to_wire_value(v) for k, v in value.items()}
        elif isinstance(value, (list, tuple, collection_module.PaginatedCollection)):
            return [self.to_wire_value(v) for v in value]
        return self.converter.convert_to_wire_value(None, value)

    def encode_nested(self, value: typing.Any) -> typing.Dict[str, typing.Any]:
        attrs = dict(value.attributes if isinstance(value, resource_module.Resource) else value)
        attrs.pop("id", None)
        return self.to_wire_value(attrs)

    def encode_attributes(
        self, instance: "resource_module.Resource"
    ) -> typing.Dict[str, typing.Any]:
        """
        Returns the underscored attributes of ``instance`` that are written back.
        """
        descr = type(instance).descriptor()
        attrs = dict(instance.attributes)
        attrs.pop("id", None)

        for name, rel in descr.relationships.items():
            if name not in attrs:
                continue
            value = attrs[name]
            if rel.type is RelationshipType.HAS_MANY:
                if name not in descr.write_has_many or value is None:
                    del attrs[name]
                else:
                    attrs[name] = [
                        self.encode_attributes(v)
                        if isinstance(v, resource_module.Resource)
                        else self.encode_nested(v)
                        for v in value
                    ]
            elif value is not None:
                attrs[name] = self.encode_nested(value)

        for name in EXCLUDED_ON_ENCODE:
            attrs.pop(name, None)
        for name in descr.remove_on_encode:
            attrs.pop(name, None)

        return {k: self.to_wire_value(v) for k, v in attrs.items()}

    def encode(self, instance: "resource_module.Resource") -> typing.Dict[str, typing.Any]:
        payload = deep_transform_keys(self.encode_attributes(instance), camelize)
        # only creation goes through the parent association
        if instance.parent_association and not instance.persisted:
            return {camelize(instance.parent_association): [payload]}
        return payload

    def __init__(self, converter: BasicTypeConverter = default_converter):
        self.converter = converter


from . import collection as collection_module  # noqa: E402
from . import resource as resource_module  # noqa: E402
