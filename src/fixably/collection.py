import typing

from .actions import Action, ActionPolicy
from .exceptions import EndOfSequence
from .logger import get_logger

logger = get_logger(__name__)

R = typing.TypeVar("R", bound="resource_module.Resource")
T = typing.TypeVar("T")


class PaginatedSequence(typing.Iterable[T]):
    """
    A lazy view over every record of every page, starting from ``start``. Each iteration
    begins again from ``start``; further pages are fetched only as iteration reaches them.
    """

    start: "PaginatedCollection"
    fn: typing.Optional[typing.Callable[[typing.Any], T]]

    def __iter__(self) -> typing.Iterator[T]:
        page = self.start
        while True:
            for item in page:
                yield self.fn(item) if self.fn is not None else item
            if not page.has_next_page():
                break
            page = page.next_page()

    def __init__(
        self,
        start: "PaginatedCollection",
        fn: typing.Optional[typing.Callable[[typing.Any], T]] = None,
    ):
        self.start = start
        self.fn = fn


class PaginatedCollection(typing.Sequence[R]):
    """
    One page of records along with its position in the whole collection.

    :param resource_class: The type of the records.
    :param Sequence items: The records on this page.
    :param int limit: The page size the server applied.
    :param int offset: The position of the first record on this page.
    :param int total_items: The size of the whole collection.
    :param Mapping query: The query parameters that produced this page.
    :param Mapping prefix_options: The ancestor identifiers the page was addressed with.
    :param parent_resource: The owner, for a nested has-many association.
    :param str parent_association: The association name on ``parent_resource``.
    """

    resource_class: typing.Type[R]
    items: typing.List[R]
    limit: int
    offset: int
    total_items: int
    query: typing.Dict[str, str]
    prefix_options: typing.Dict[str, typing.Any]
    parent_resource: typing.Optional["resource_module.Resource"]
    parent_association: typing.Optional[str]

    @classmethod
    def empty(
        cls,
        resource_class: typing.Type[R],
        parent_resource: typing.Optional["resource_module.Resource"] = None,
        parent_association: typing.Optional[str] = None,
    ) -> "PaginatedCollection[R]":
        return cls(
            resource_class,
            [],
            parent_resource=parent_resource,
            parent_association=parent_association,
        )

    def has_next_page(self) -> bool:
        return self.limit + self.offset < self.total_items

    def has_previous_page(self) -> bool:
        return self.offset > 0

    def next_page(self) -> "PaginatedCollection[R]":
        if not self.has_next_page():
            raise EndOfSequence()
        return self._fetch(limit=self.limit, offset=self.offset + self.limit)

    def previous_page(self) -> "PaginatedCollection[R]":
        if not self.has_previous_page():
            raise EndOfSequence()
        offset = self.offset - self.limit
        limit = self.limit
        if offset < 0:
            limit += offset
            offset = 0
        return self._fetch(limit=limit, offset=offset)

    def _fetch(self, limit: int, offset: int) -> "PaginatedCollection[R]":
        ActionPolicy(self.resource_class).require(Action.LIST)
        query = dict(self.query)
        query["limit"] = str(limit)
        query["offset"] = str(offset)
        logger.debug(
            "fetching %s page at offset %d with limit %d",
            self.resource_class.descriptor().plural,
            offset,
            limit,
        )
        return self.resource_class.fetch_collection(
            query,
            prefix_options=self.prefix_options,
            parent_resource=self.parent_resource,
            parent_association=self.parent_association,
        )

    def paginated_each(self) -> PaginatedSequence[R]:
        return PaginatedSequence(self)

    def paginated_map(self, fn: typing.Callable[[R], T]) -> PaginatedSequence[T]:
        return PaginatedSequence(self, fn)

    def append(self, record: R) -> None:
        """
        Creates ``record`` as a member of the nested association this page belongs to
        and appends it to the records in memory. The pagination counters are left as-is.
        """
        attach.create_has_many_record(record, self)

    def __getitem__(self, index):
        return self.items[index]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> typing.Iterator[R]:
        return iter(self.items)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} of {self.resource_class.__qualname__} "
            f"limit={self.limit} offset={self.offset} total_items={self.total_items} "
            f"items={self.items!r}>"
        )

    def __init__(
        self,
        resource_class: typing.Type[R],
        items: typing.Iterable[R] = (),
        limit: int = 0,
        offset: int = 0,
        total_items: int = 0,
        query: typing.Optional[typing.Mapping[str, str]] = None,
        prefix_options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        parent_resource: typing.Optional["resource_module.Resource"] = None,
        parent_association: typing.Optional[str] = None,
    ):
        self.resource_class = resource_class
        self.items = list(items)
        self.limit = limit
        self.offset = offset
        self.total_items = total_items
        self.query = dict(query or {})
        self.prefix_options = dict(prefix_options or {})
        self.parent_resource = parent_resource
        self.parent_association = parent_association


from . import attach  # noqa: E402
from . import resource as resource_module  # noqa: E402
