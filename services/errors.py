# services/errors.py


class RadioServiceError(Exception):
    """Base class for errors raised by the service layer"""


class StationNotFound(RadioServiceError):
    def __init__(self, station_code: str):
        super().__init__(f"Station not found: {station_code}")
        self.station_code = station_code


class RateLimitExceeded(RadioServiceError):
    """Too many votes from one address on one station; the client should retry later."""

    def __init__(self, max_votes: int, window_hours: int):
        super().__init__(
            f"Rate limit exceeded. Maximum {max_votes} votes per "
            f"{'hour' if window_hours == 1 else f'{window_hours} hours'} allowed per station."
        )
        self.max_votes = max_votes
        self.window_hours = window_hours


class StorageFailure(RadioServiceError):
    pass
