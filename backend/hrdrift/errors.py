"""Failure taxonomy for the drop pipeline and the Strava collaborators."""


class DropError(Exception):
    """Base class for anything that ends a drop interaction early."""


class InvalidDropError(DropError):
    """The drop carried no file, or the first file is not JSON."""

    def __init__(self, reason: str, empty: bool = False):
        super().__init__(reason)
        self.reason = reason
        self.empty = empty


class DropInProgress(DropError):
    """A second drop arrived while the previous one was still being read."""

    def __init__(self):
        super().__init__("A dropped file is already being processed")


class ValidationError(DropError):
    pass


class Malformed(ValidationError):
    """The file text is not a valid JSON document."""

    def __init__(self, message: str):
        super().__init__(f"Malformed JSON: {message}")
        self.message = message


class MissingField(ValidationError):
    """A required numeric array is absent or has the wrong shape."""

    def __init__(self, field_name: str):
        super().__init__(f"Missing or invalid field: {field_name}")
        self.field_name = field_name


class StravaError(Exception):
    """Strava answered with an error or could not be reached."""


class StravaNotLinked(StravaError):
    def __init__(self):
        super().__init__("Strava not linked. Hit /strava/auth_url first.")
