import abc
import datetime
import enum
import typing

Tn = typing.TypeVar("Tn")

_TRUTHY = frozenset(["true", "1", "yes"])
_FALSY = frozenset(["false", "0", "no", ""])


class BasicTypeConverter(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def convert_to_wire_value(
        self, typ: typing.Optional[typing.Type], value: typing.Any
    ) -> typing.Any:
        ...  # pragma: nocover

    @abc.abstractmethod
    def convert_from_wire_value(
        self, typ: typing.Optional[typing.Type[Tn]], value: typing.Any
    ) -> typing.Optional[Tn]:
        ...  # pragma: nocover


class DefaultBasicTypeConverterImpl(BasicTypeConverter):
    def convert_to_wire_value(
        self, typ: typing.Optional[typing.Type], value: typing.Any
    ) -> typing.Any:
        if value is None:
            return None
        elif isinstance(value, enum.Enum):
            return value.value
        elif isinstance(value, datetime.datetime):
            return value.isoformat()
        elif isinstance(value, datetime.date):
            return value.strftime("%Y-%m-%d")
        return value

    def convert_from_wire_value(
        self, typ: typing.Optional[typing.Type[Tn]], value: typing.Any
    ) -> typing.Optional[Tn]:
        if value is None or typ is None or isinstance(value, typ):
            return value
        elif issubclass(typ, enum.Enum):
            for e in typ:
                if e.value == value:
                    return typing.cast(Tn, e)
            raise ValueError(f"{value} is not a valid name for the enum {typ}")
        elif issubclass(typ, bool):
            if isinstance(value, str):
                lowered = value.lower()
                if lowered in _TRUTHY:
                    return typing.cast(Tn, True)
                elif lowered in _FALSY:
                    return typing.cast(Tn, False)
            elif isinstance(value, int):
                return typing.cast(Tn, bool(value))
        elif issubclass(typ, datetime.datetime):
            if isinstance(value, str):
                return typing.cast(
                    Tn, datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
                )
        elif issubclass(typ, datetime.date):
            if isinstance(value, str):
                return typing.cast(Tn, datetime.date.fromisoformat(value[:10]))
        elif issubclass(typ, (int, float)):
            if isinstance(value, (str, int, float)) and not isinstance(value, bool):
                return typing.cast(Tn, typ(value))
        elif issubclass(typ, str):
            if isinstance(value, (int, float)):
                return typing.cast(Tn, str(value))
        raise TypeError(f"unsupported conversion from {type(value)} to {typ}")

    def accepts(self, typ: typing.Optional[typing.Type], value: typing.Any) -> bool:
        """
        Tells whether ``value`` may be assigned to an attribute declared with ``typ``.
        """
        if value is None or typ is None:
            return True
        elif typ is float:
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        elif typ is int:
            return isinstance(value, int) and not isinstance(value, bool)
        elif typ is datetime.date:
            return isinstance(value, datetime.date) and not isinstance(value, datetime.datetime)
        return isinstance(value, typ)


default_converter = DefaultBasicTypeConverterImpl()
