from .base import Base

from .user import User
from .owner import Owner
from .walker import Walker
from .dog import Dog
from .assessment import Assessment
from .walk import Walk
