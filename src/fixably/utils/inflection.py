import re
import typing

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

IRREGULAR_PLURALS: typing.Dict[str, str] = {
    "child": "children",
    "person": "people",
}


def camelize(name: str) -> str:
    """
    Converts an underscored name into lower camel case: ``first_name`` becomes ``firstName``.
    """
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def underscore(name: str) -> str:
    """
    Converts a camel-cased name into its underscored form: ``totalItems`` becomes ``total_items``.
    """
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


def humanize(name: str) -> str:
    return name.replace("_", " ").strip()


def pluralize(phrase: str) -> str:
    """
    Pluralizes the last word of ``phrase``.
    """
    head, sep, word = phrase.rpartition(" ")
    lowered = word.lower()
    if lowered in IRREGULAR_PLURALS:
        plural = IRREGULAR_PLURALS[lowered]
    elif re.search(r"(s|x|z|ch|sh)$", lowered):
        plural = word + "es"
    elif re.search(r"[^aeiou]y$", lowered):
        plural = word[:-1] + "ies"
    else:
        plural = word + "s"
    return head + sep + plural


T = typing.TypeVar("T")


def deep_transform_keys(value: T, fn: typing.Callable[[str], str]) -> T:
    """
    Returns a copy of ``value`` with ``fn`` applied to every mapping key, descending
    into nested mappings and lists.
    """
    if isinstance(value, typing.Mapping):
        return typing.cast(
            T,
            {
                (fn(k) if isinstance(k, str) else k): deep_transform_keys(v, fn)
                for k, v in value.items()
            },
        )
    elif isinstance(value, list):
        return typing.cast(T, [deep_transform_keys(v, fn) for v in value])
    return value


def english_enumerate(items: typing.Iterable[str], conj: str = " and ") -> str:
    buf = list(items)
    if len(buf) <= 1:
        return "".join(buf)
    return ", ".join(buf[:-1]) + conj + buf[-1]
