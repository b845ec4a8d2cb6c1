import typing

from ..resource import Resource
from ..utils import english_enumerate


class Order(Resource):
    ALLOWED_INTERNAL_LOCATIONS = ("CUSTOMER", "DEALER_SHOP", "IN_TRANSIT", "SERVICE", "STORE")

    class Meta:
        actions = ["create", "list", "show"]
        attributes = {
            "internal_location": str,
            "is_draft": bool,
            "reference": str,
        }
        has_one = {
            "contact": "order/contact",
            "customer": "customer",
            "device": "device",
            "handled_by": "customer",
            "location": "location",
            "ordered_by": "customer",
            "queue": "queue",
            "status": "status",
        }
        has_many = {
            "lines": "order/line",
            "notes": "order/note",
            "tasks": "order/task",
        }
        write_has_many = ["notes"]

    def validate(self) -> typing.List[str]:
        if (
            self.internal_location is not None
            and self.internal_location not in self.ALLOWED_INTERNAL_LOCATIONS
        ):
            return [
                "Internal location should be one of "
                + english_enumerate(self.ALLOWED_INTERNAL_LOCATIONS, conj=" or ")
            ]
        return []

    class Contact(Resource):
        class Meta:
            attributes = {
                "full_name": str,
                "company": str,
                "phone_number": str,
                "email_address": str,
            }

    class Line(Resource):
        class Meta:
            actions = ["list", "show"]

    class Note(Resource):
        ALLOWED_TYPES = ("DIAGNOSIS", "INTERNAL", "ISSUE", "RESOLUTION")

        class Meta:
            actions = ["create", "list", "show"]
            attributes = {"title": str, "text": str, "type": str}
            has_one = {"created_by": "user"}

        def validate(self) -> typing.List[str]:
            if self.type not in self.ALLOWED_TYPES:
                return [
                    "Type should be one of "
                    + english_enumerate(self.ALLOWED_TYPES, conj=" or ")
                ]
            return []

    class Task(Resource):
        class Meta:
            actions = ["list", "show"]
