from ..resource import Resource


class Location(Resource):
    class Meta:
        actions = ["list", "show"]
        attributes = {"name": str}
