from .catalog.activity import Activity
from .catalog.facility import Facility

from .booking.bookings import Booking
from .booking.orders import Order

from .users.profile import Profile
