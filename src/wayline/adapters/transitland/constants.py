"""Constants for the TransitLand REST API."""

TRANSITLAND_DEFAULT_BASE_URL = "https://transit.land/api/v2/rest"
TRANSITLAND_API_KEY_HEADER = "apikey"
TRANSITLAND_DEPARTURES_PATH = "/stops/{feed_onestop_id}:{stop_id}/departures"
