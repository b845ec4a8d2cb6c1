import typing

from .exceptions import RecordTypeMismatchError, StructuralError
from .logger import get_logger

if typing.TYPE_CHECKING:
    from .collection import PaginatedCollection  # noqa: F401
    from .resource import Resource  # noqa: F401

logger = get_logger(__name__)


def ensure_appendable(record: "Resource", collection: "PaginatedCollection") -> None:
    """
    Raises :py:class:`StructuralError` unless ``record`` can be created as a member of
    the nested association ``collection`` represents.
    """
    if type(record) is not collection.resource_class:
        raise RecordTypeMismatchError(collection.resource_class.__qualname__)

    if type(record).descriptor().nesting_depth != 1:
        raise StructuralError("Can only append resources nested one level deep")

    if collection.parent_resource is None:
        raise StructuralError("A parent resource has not been set")

    if not collection.parent_association:
        raise StructuralError("The association to the parent resource has not been set")

    if not collection.parent_resource.persisted:
        raise StructuralError("The parent resource has not been persisted")

    if collection.parent_resource["id"] is None:
        raise StructuralError("Cannot find an ID for the parent resource")


def parent_id_key(collection: "PaginatedCollection") -> str:
    assert collection.parent_resource is not None
    return f"{type(collection.parent_resource).descriptor().name}_id"


def create_has_many_record(record: "Resource", collection: "PaginatedCollection") -> "Resource":
    ensure_appendable(record, collection)
    assert collection.parent_resource is not None

    record.parent_association = collection.parent_association
    record.prefix_options[parent_id_key(collection)] = collection.parent_resource["id"]
    logger.debug(
        "creating %s through %s",
        type(record).descriptor().name,
        collection.parent_association,
    )
    record.save_or_raise()
    collection.items.append(record)
    return record
