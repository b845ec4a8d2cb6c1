from ..resource import Resource


class User(Resource):
    class Meta:
        actions = "show"
        attributes = {
            "id": int,
            "first_name": str,
            "last_name": str,
            "email": str,
            "phone": str,
        }
