import enum
import typing

from .exceptions import PermissionDenied, ValidationArgumentError
from .utils import humanize, pluralize


class Action(enum.Enum):
    CREATE = "create"
    DELETE = "delete"
    LIST = "list"
    SHOW = "show"
    UPDATE = "update"

    @property
    def verb(self) -> str:
        """
        The progressive form used when reporting an unsupported action.
        """
        return _VERBS[self]


_VERBS: typing.Mapping[Action, str] = {
    Action.CREATE: "creating",
    Action.DELETE: "deleting",
    Action.LIST: "listing",
    Action.SHOW: "retrieving",
    Action.UPDATE: "updating",
}


def format_actions(values: typing.Any) -> typing.Tuple[Action, ...]:
    """
    Normalises an action declaration. A single action may be given as a string or an
    :py:class:`Action`; several may be given as any iterable of those.
    """
    if isinstance(values, (str, Action)):
        values = [values]
    elif not isinstance(values, typing.Iterable):
        raise ValidationArgumentError(
            "actions should be able to be converted into a sequence or a string"
        )

    result: typing.List[Action] = []
    for value in values:
        if isinstance(value, Action):
            action = value
        else:
            try:
                action = Action(value)
            except ValueError:
                raise ValidationArgumentError(f"Unsupported action, {value}, supplied") from None
        if action not in result:
            result.append(action)
    return tuple(result)


class ActionPolicy:
    """
    An :py:class:`ActionPolicy` answers whether a resource type permits an action.

    :param resource: A :py:class:`fixably.resource.Resource` subclass or an instance of one.
    """

    resource: typing.Type["resource_module.Resource"]

    @property
    def resource_name(self) -> str:
        return pluralize(humanize(self.resource.descriptor().name)).lower()

    def check(self, action: Action) -> bool:
        return action in self.resource.actions()

    def require(self, action: Action) -> bool:
        if self.check(action):
            return True
        raise PermissionDenied(self.resource_name, action.verb)

    def __init__(
        self,
        resource: typing.Union[
            typing.Type["resource_module.Resource"], "resource_module.Resource"
        ],
    ):
        if not isinstance(resource, type):
            resource = type(resource)
        if not issubclass(resource, resource_module.Resource):
            raise TypeError("The resource should inherit from Resource")
        self.resource = resource


from . import resource as resource_module  # noqa: E402
