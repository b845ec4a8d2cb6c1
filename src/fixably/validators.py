import typing

from .exceptions import ValidationArgumentError
from .utils import english_enumerate

FilterSpecification = typing.Mapping[str, typing.Any]


class FiltersValidator:
    """
    Checks the filters of a listing call against what the endpoint permits. Each
    permitted filter is specified as ``{"required": bool, "type": type}``.

    :param Mapping permitted_filters: The filters the endpoint accepts, by name.
    :param Mapping filters: The filters supplied by the caller.
    """

    permitted_filters: typing.Mapping[str, FilterSpecification]
    filters: typing.Mapping[str, typing.Any]

    def required_filters(self) -> typing.List[str]:
        return [
            name for name, specs in self.permitted_filters.items() if specs.get("required") is True
        ]

    def unpermitted_filters(self) -> typing.List[str]:
        return [name for name in self.filters if name not in self.permitted_filters]

    def errors(self) -> typing.List[str]:
        errors: typing.List[str] = []
        for name in self.required_filters():
            if self.filters.get(name) is None:
                errors.append(f"The endpoint requires the {name} filter")
        for name in self.unpermitted_filters():
            errors.append(f"Received unexpected parameter, {name}")
        for name, value in self.filters.items():
            specs = self.permitted_filters.get(name)
            if specs is None:
                continue
            typ = specs.get("type")
            if typ is None or isinstance(value, typ):
                continue
            errors.append(
                f"Expected {name} to be a {getattr(typ, '__name__', typ)} "
                f"but it is a {type(value).__name__}"
            )
        return errors

    def is_valid(self) -> bool:
        return not self.errors()

    def validate(self) -> None:
        errors = self.errors()
        if errors:
            raise ValidationArgumentError(english_enumerate(errors))

    def __init__(
        self,
        permitted_filters: typing.Mapping[str, FilterSpecification],
        filters: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ):
        self.permitted_filters = permitted_filters
        self.filters = filters or {}
