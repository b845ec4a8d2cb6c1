import pytest

from ..actions import Action, ActionPolicy, format_actions
from ..exceptions import InvalidDeclarationError, PermissionDenied, ValidationArgumentError
from ..resource import Resource
from ..resources import Customer, CustomerChild, Order, User
from .testing import Gadget, Widget


class TestFormatActions:
    def test_single_string(self):
        assert format_actions("show") == (Action.SHOW,)

    def test_single_action(self):
        assert format_actions(Action.LIST) == (Action.LIST,)

    def test_sequence_is_deduplicated(self):
        assert format_actions(["create", "list", Action.CREATE]) == (
            Action.CREATE,
            Action.LIST,
        )

    def test_unsupported(self):
        with pytest.raises(ValidationArgumentError, match="Unsupported action, archive, supplied"):
            format_actions(["show", "archive"])

    def test_not_convertible(self):
        with pytest.raises(ValidationArgumentError):
            format_actions(42)


class TestActionPolicy:
    def test_check(self):
        policy = ActionPolicy(Customer)
        assert policy.check(Action.CREATE)
        assert policy.check(Action.UPDATE)
        assert not policy.check(Action.DELETE)

    def test_accepts_instances(self):
        assert ActionPolicy(Customer()).resource is Customer

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            ActionPolicy(dict)

    @pytest.mark.parametrize(
        "resource, action, message",
        [
            (Customer, Action.DELETE, "Fixably does not support deleting customers"),
            (Order, Action.UPDATE, "Fixably does not support updating orders"),
            (User, Action.LIST, "Fixably does not support listing users"),
            (CustomerChild, Action.CREATE, "Fixably does not support creating children"),
            (Order.Note, Action.DELETE, "Fixably does not support deleting notes"),
            (Gadget, Action.SHOW, "Fixably does not support retrieving gadgets"),
        ],
    )
    def test_require(self, resource, action, message):
        with pytest.raises(PermissionDenied) as excinfo:
            ActionPolicy(resource).require(action)
        assert str(excinfo.value) == message

    def test_require_permitted(self):
        assert ActionPolicy(Widget).require(Action.DELETE) is True


class TestActionDeclaration:
    def test_base_type(self):
        with pytest.raises(InvalidDeclarationError):
            Resource.actions()
        with pytest.raises(InvalidDeclarationError):
            Resource.declare_actions(["show"])

    def test_assigned_once(self):
        class Sprocket(Resource):
            pass

        assert Sprocket.actions() == ()
        assert Sprocket.declare_actions(["list", "show"]) == (Action.LIST, Action.SHOW)
        with pytest.raises(InvalidDeclarationError):
            Sprocket.declare_actions(["create"])
        assert Sprocket.actions() == (Action.LIST, Action.SHOW)

    def test_declared_in_meta_cannot_be_reassigned(self):
        with pytest.raises(InvalidDeclarationError):
            Widget.declare_actions(["show"])

    def test_not_inherited(self):
        assert CustomerChild.actions() == (Action.SHOW,)


@pytest.mark.parametrize(
    "call",
    [
        lambda: Gadget.all(),
        lambda: Gadget.where(title="x"),
        lambda: Gadget.first(),
        lambda: Gadget.last(),
        lambda: Gadget.find(1),
        lambda: Gadget.create(title="x"),
        lambda: Gadget.create_or_raise(title="x"),
        lambda: Gadget.delete(1),
        lambda: Gadget(title="x").save(),
        lambda: Gadget(title="x").save_or_raise(),
        lambda: Gadget({"id": 1}, persisted=True).save(),
        lambda: Gadget({"id": 1}, persisted=True).destroy(),
        lambda: Gadget({"id": 1}, persisted=True).reload(),
    ],
)
def test_denied_before_any_request(transport, call):
    with pytest.raises(PermissionDenied):
        call()
    assert transport.requests == []
