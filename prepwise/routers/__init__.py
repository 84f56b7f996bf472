"""API routers package"""

from . import interviews
from . import structures
from . import profiles

__all__ = ["interviews", "structures", "profiles"]
