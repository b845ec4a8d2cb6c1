import datetime

import pytest

from ..codec import DefaultDecoderImpl, DefaultEncoderImpl, Encoder
from ..declarative import Meta, build_attributes, handle_meta, resource_path
from ..exceptions import InvalidDeclarationError
from ..models import RelationshipType, ResourceRegistry
from ..resource import Resource


@pytest.fixture
def base():
    class Base(Resource):
        registry = ResourceRegistry()

        class Meta:
            abstract = True

    return Base


class UpperEncoder(Encoder):
    def encode(self, instance):
        return {k.upper(): v for k, v in instance.attributes.items()}


def test_handle_meta():
    class Meta_:
        name = "thing"
        plural = "things"

    assert handle_meta(None) == Meta()
    assert handle_meta(Meta_) == Meta(name="thing", plural="things")


def test_unknown_meta_option():
    class Meta_:
        attribute = {"name": str}

    with pytest.raises(InvalidDeclarationError, match="unknown Meta options: attribute"):
        handle_meta(Meta_)


def test_build_attributes():
    assert [(a.name, a.type) for a in build_attributes({"a": int, "b": None})] == [
        ("a", int),
        ("b", None),
    ]
    assert [(a.name, a.type) for a in build_attributes(["a", "b"])] == [("a", None), ("b", None)]
    assert build_attributes(None) == []
    with pytest.raises(InvalidDeclarationError):
        build_attributes("a")


class TestPath:
    def test_derived_from_qualified_name(self, base):
        class Shop(base):
            class Meta:
                actions = ["list"]

            class ShelfUnit(base):
                pass

        assert resource_path(Shop, Meta()) == ((), "shop")
        assert resource_path(Shop.ShelfUnit, Meta()) == (("shop",), "shelf_unit")

        descr = Shop.ShelfUnit.descriptor()
        assert descr.key == "shop/shelf_unit"
        assert descr.plural == "shelf_units"
        assert descr.nesting_depth == 1
        assert descr.parent_key == "shop"
        assert descr.prefix_parameter == "shop_id"
        assert base.registry.class_for("shop/shelf_unit") is Shop.ShelfUnit

    def test_overridden_by_meta(self, base):
        class Person(base):
            class Meta:
                name = "child"
                parent = "customer"
                plural = "children"

        descr = Person.descriptor()
        assert descr.path == ("customer", "child")
        assert descr.plural == "children"
        assert Person.collection_path({"customer_id": 4}) == "/customers/4/children"

    def test_doubly_nested(self, base):
        class Shop(base):
            class Shelf(base):
                class Box(base):
                    pass

        descr = Shop.Shelf.Box.descriptor()
        assert descr.parents == ("shop", "shelf")
        assert descr.nesting_depth == 2
        assert descr.prefix_parameter == "shop_id"


class TestDescriptor:
    def test_members(self, base):
        class Shop(base):
            class Meta:
                attributes = {"name": str, "opened_on": datetime.date}
                has_one = {"owner": "owner"}
                has_many = {"shelves": "shop/shelf"}

            class Shelf(base):
                pass

        class Owner(base):
            pass

        descr = Shop.descriptor()
        assert list(descr.attributes) == ["name", "opened_on"]
        assert descr.attributes["opened_on"].type is datetime.date
        assert list(descr.has_one) == ["owner"]
        assert list(descr.has_many) == ["shelves"]
        assert descr.relationships["owner"].type is RelationshipType.HAS_ONE
        assert descr.relationships["owner"].destination_class is Owner
        assert descr.relationships["shelves"].destination is Shop.Shelf.descriptor()
        assert descr.declares("id")
        assert descr.declares("owner")
        assert not descr.declares("colour")
        assert descr.actions == ()

    def test_default_codec(self, base):
        class Shop(base):
            pass

        assert isinstance(Shop.encoder(), DefaultEncoderImpl)
        assert isinstance(Shop.decoder(), DefaultDecoderImpl)

    def test_custom_encoder(self, base):
        class Shop(base):
            class Meta:
                encoder = UpperEncoder()
                attributes = ["name"]

        assert Shop(name="s").encode() == {"NAME": "s"}

    def test_attribute_and_association_overlap(self, base):
        with pytest.raises(InvalidDeclarationError, match="owner declared both"):

            class Shop(base):
                class Meta:
                    attributes = {"owner": str}
                    has_one = {"owner": "owner"}

    def test_write_has_many_requires_has_many(self, base):
        with pytest.raises(InvalidDeclarationError, match="not a has_many association"):

            class Shop(base):
                class Meta:
                    has_one = {"owner": "owner"}
                    write_has_many = ["owner"]

    def test_unresolvable_destination(self, base):
        class Shop(base):
            class Meta:
                has_one = {"owner": "nobody"}

        with pytest.raises(InvalidDeclarationError, match='no resource known as "nobody"'):
            Shop.descriptor().relationships["owner"].destination_class

    def test_abstract_is_not_registered(self, base):
        assert not base.registry.is_registered(base)
        with pytest.raises(InvalidDeclarationError, match="is not a declared resource"):
            base.descriptor()


class TestInheritance:
    def test_members_are_inherited(self, base):
        class Shop(base):
            class Meta:
                actions = ["list", "show"]
                attributes = {"name": str}
                has_one = {"owner": "owner"}
                remove_on_encode = ["tags"]
                encoder = UpperEncoder()

        class Outlet(Shop):
            class Meta:
                attributes = {"mall": str}

        descr = Outlet.descriptor()
        assert list(descr.attributes) == ["name", "mall"]
        assert list(descr.relationships) == ["owner"]
        assert descr.relationships["owner"] is not Shop.descriptor().relationships["owner"]
        assert descr.remove_on_encode == frozenset(["tags"])
        assert descr.encoder is Shop.descriptor().encoder
        assert descr.key == "outlet"
        assert Outlet.actions() == ()
        assert Shop.actions() != ()

    def test_registration_is_per_class(self, base):
        class Shop(base):
            pass

        with pytest.raises(InvalidDeclarationError, match="already registered"):
            base.registry.register(Shop, Shop.descriptor())
