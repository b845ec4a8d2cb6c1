from .customer import Customer, CustomerChild  # noqa
from .device import Device  # noqa
from .location import Location  # noqa
from .order import Order  # noqa
from .queue import Queue  # noqa
from .status import Status  # noqa
from .user import User  # noqa
