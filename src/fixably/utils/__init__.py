from .inflection import (  # noqa
    camelize,
    deep_transform_keys,
    english_enumerate,
    humanize,
    pluralize,
    underscore,
)
