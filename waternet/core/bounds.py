"""Geographic bounding box every node location must fall within."""

MIN_LATITUDE = 38.5
MAX_LATITUDE = 39.8
MIN_LONGITUDE = 19.3
MAX_LONGITUDE = 20.3

OUT_OF_BOUNDS_MESSAGE = "Node location must be within the network bounds"


def within_bounds(latitude: float, longitude: float) -> bool:
    """True when (latitude, longitude) lies inside the box, edges included."""
    return (
        MIN_LATITUDE <= latitude <= MAX_LATITUDE
        and MIN_LONGITUDE <= longitude <= MAX_LONGITUDE
    )
