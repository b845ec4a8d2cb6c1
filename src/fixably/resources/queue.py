from ..resource import Resource


class Queue(Resource):
    class Meta:
        actions = ["list", "show"]
        has_many = {"statuses": "status"}
