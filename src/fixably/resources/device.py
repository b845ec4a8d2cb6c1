import datetime
import typing

from ..resource import Resource


class Device(Resource):
    class Meta:
        actions = ["create", "list", "show"]
        attributes = {
            "serial_number": str,
            "imei_number1": str,
            "imei_number2": str,
            "name": str,
            "configuration": str,
            "brand": str,
            "purchase_country": str,
            "purchase_date": datetime.date,
        }

    def validate(self) -> typing.List[str]:
        errors = []
        if not self.name:
            errors.append("Name can't be blank")
        if not (self.serial_number or self.imei_number1):
            errors.append("Either serial number or IMEI must be present")
        return errors
