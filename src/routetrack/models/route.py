"""Route catalog entry model."""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator

from routetrack.models._base import RouteTrackBaseModel
from routetrack.models.geo import LatLng


class Route(RouteTrackBaseModel):
    """A predefined trip with a start and an end point.

    Parameters
    ----------
    id : str
        Opaque route identifier (``_id`` in the listing payload).
    title : str
        Display title shown to the operator.
    start_position : LatLng
        Where the vehicle departs; the current-position marker starts here.
    end_position : LatLng
        Destination; a static pin is placed here while tracking.
    raw : dict
        Original listing entry.
    """

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    title: str
    start_position: LatLng
    end_position: LatLng

    @field_validator("id", "title")
    @classmethod
    def _strip(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must be non-empty")
        return stripped
