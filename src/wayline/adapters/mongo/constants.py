"""MongoDB collection names and query defaults."""

STOPS_COLLECTION = "stops"
FEEDS_COLLECTION = "feeds"
ROUTES_COLLECTION = "routes"
ROUTE_STOPS_COLLECTION = "routestops"

DEFAULT_ROUTE_SHORT_NAME = "R"
DEFAULT_ROUTE_TYPE = 3
