import typing

from ..resource import Resource

ADDRESS_ATTRIBUTES: typing.Mapping[str, typing.Type] = {
    "name": str,
    "address1": str,
    "address2": str,
    "address3": str,
    "zip": str,
    "city": str,
    "state": str,
    "country": str,
}


class Customer(Resource):
    class Meta:
        actions = ["create", "list", "show", "update"]
        attributes = {
            "first_name": str,
            "last_name": str,
            "company": str,
            "phone": str,
            "email": str,
            "business_id": str,
            "language": str,
            "provider": str,
            "identifier": str,
        }
        has_one = {
            "billing_address": "customer/billing_address",
            "shipping_address": "customer/shipping_address",
        }
        has_many = {"children": "customer/child"}
        remove_on_encode = ["tags"]

    def validate(self) -> typing.List[str]:
        if self.email or self.phone:
            return []
        return ["Either email or phone must be present"]

    class BillingAddress(Resource):
        class Meta:
            attributes = ADDRESS_ATTRIBUTES

    class ShippingAddress(Resource):
        class Meta:
            attributes = ADDRESS_ATTRIBUTES


class CustomerChild(Customer):
    """
    A customer registered under another customer, reachable as ``customer.children``.
    """

    class Meta:
        name = "child"
        parent = "customer"
        plural = "children"
        actions = ["show"]
