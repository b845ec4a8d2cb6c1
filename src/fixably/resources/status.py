from ..resource import Resource


class Status(Resource):
    class Meta:
        actions = ["list", "show"]
        has_one = {"custom": "status/custom", "queue": "queue"}

    class Custom(Resource):
        pass
