"""Exception hierarchy for fred_rss."""


class FredRssError(Exception):
    """Base class for all fred_rss errors."""


class ConfigError(FredRssError):
    """Startup configuration is missing, unreadable or malformed."""


class FetchError(FredRssError):
    """Retrieving a feed failed.

    Attributes:
        url: The feed URL that was requested.
    """

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(message)


class NetworkError(FetchError):
    """Transport-level failure while downloading a feed."""


class ParseError(FetchError):
    """The response body is not a usable feed document."""


class NavigationError(FredRssError):
    """A navigation action is not valid in the current state."""


class DispatchError(FredRssError):
    """The background worker no longer accepts fetch requests."""
