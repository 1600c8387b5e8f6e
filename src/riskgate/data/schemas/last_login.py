"""LastLogin schema - where and when an identity last signed in."""

from datetime import datetime
from typing import Optional

from riskgate.data.schemas.base import CamelModel
from riskgate.data.schemas.location import Location


class LastLogin(CamelModel):
    location: Optional[Location] = None
    last_login: datetime
