"""Data schemas for vessel observations."""

from typing import List
from pydantic import BaseModel, Field

from ..utils.formatting import format_number


class VesselRecord(BaseModel):
    """One position report for one vessel, in human readable units."""

    mmsi: int = Field(..., gt=0, description="Maritime Mobile Service Identity")
    name: str = Field("", description="Vessel name as broadcast, may be empty")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    speed: float = Field(..., description="Speed over ground in knots")
    course: float = Field(..., description="Course over ground in degrees")
    timestamp: str = Field(..., description="Report time as delivered by AISHub")
    notes: str = Field("", description="Free text appended as the last column")

    def position_fields(self) -> List[str]:
        """Columns after the name column, rendered for the vessel file."""
        return [
            format_number(self.latitude),
            format_number(self.longitude),
            format_number(self.speed),
            format_number(self.course),
            self.timestamp,
            self.notes,
        ]
