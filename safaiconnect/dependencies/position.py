from typing import Callable, Optional

from safaiconnect.models.route import GeoPoint
from safaiconnect.services.position import PositionProvider, fixed_position

PositionSource = Callable[[Optional[GeoPoint]], PositionProvider]


def get_position_source() -> PositionSource:
    """
    Builds the provider a request's route is planned with.
    By default the reading sent by the client is used as-is; override this
    dependency to plug in another source (device bridge, cached last fix).
    """
    return fixed_position
