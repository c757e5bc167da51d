"""Error taxonomy shared by the weather client and the view model."""


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""
    pass


class NetworkError(WeatherProviderError):
    """The request did not complete or returned a non-2xx status."""
    pass


class FormatError(WeatherProviderError):
    """The response body is not JSON or does not describe a valid reading."""
    pass
