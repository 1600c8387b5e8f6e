"""UserBaseline schema - per-identity behavioral profile."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from riskgate.data.schemas.base import CamelModel
from riskgate.data.schemas.location import Location


class UserBaseline(CamelModel):
    """Typical locations, login hours and devices of one identity."""
    typical_locations: List[Location] = Field(
        default_factory=list, description="Most recent locations, oldest first"
    )
    typical_time_of_day: List[int] = Field(
        default_factory=list, description="UTC hours seen, sorted"
    )
    typical_devices: List[str] = Field(default_factory=list)
    last_updated: Optional[datetime] = Field(
        default=None, description="None until the first fold"
    )

    @property
    def is_empty(self) -> bool:
        return not (
            self.typical_locations or self.typical_time_of_day or self.typical_devices
        )
