"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from weather_data import WeatherReading
from weather_errors import WeatherProviderError, NetworkError, FormatError

__all__ = ["WeatherProviderBase", "WeatherProviderError", "NetworkError", "FormatError"]


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""
    
    @abstractmethod
    def fetch_reading(self, location_query: str) -> WeatherReading:
        """
        Fetch the current reading for a location.
        
        Each call issues exactly one request; no retries are performed.
        
        Args:
            location_query: Location name understood by the provider
        
        Returns:
            WeatherReading: Current weather information
            
        Raises:
            NetworkError: If the transport fails or the status is not 2xx
            FormatError: If the response cannot be turned into a valid reading
        """
        pass
