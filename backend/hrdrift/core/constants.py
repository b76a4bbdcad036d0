"""Shared application constants.

Centralizes the values the drop target and Strava integration agree on so
we can document and adjust them in one place.
"""

# Alert shown when a drop carries no file or a non-JSON file
INVALID_DROP_ALERT = "Please drop a valid JSON file."

# Dotted paths of the two required sample arrays, in validation order
HEARTRATE_FIELD = "heartrate.data"
TIME_FIELD = "time.data"

# Strava endpoints, relative to settings.strava_base_url
STRAVA_AUTHORIZE_PATH = "/oauth/authorize"
STRAVA_TOKEN_PATH = "/oauth/token"
STRAVA_STREAMS_PATH = "/api/v3/activities/{activity_id}/streams"
STRAVA_SCOPE = "activity:read_all"

# Streams requested from Strava, keyed by type so the body matches the
# dropped-file format
STRAVA_STREAM_KEYS = ["heartrate", "time"]
