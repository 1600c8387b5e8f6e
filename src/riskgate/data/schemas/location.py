"""Location schema - resolved client geography."""

from pydantic import Field

from riskgate.data.schemas.base import CamelModel


class Location(CamelModel):
    """Geographic location of a login attempt.

    Absent on an attempt when the edge network cannot resolve it.
    """
    country: str = Field(default="Unknown", description="Country code or name")
    city: str = Field(default="Unknown", description="City name")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    timezone: str = Field(default="UTC", description="IANA timezone name")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "country": "US",
                "city": "New York",
                "latitude": 40.7128,
                "longitude": -74.0060,
                "timezone": "America/New_York",
            }
        },
    }
