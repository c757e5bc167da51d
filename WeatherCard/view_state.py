"""View state for the weather card: Idle, Loading, Ready or Failed."""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from derived_metrics import compute_derived
from weather_data import DerivedSet, WeatherReading
from weather_provider import WeatherProviderBase, WeatherProviderError

GENERIC_FAILURE_MESSAGE = "Failed to load weather data"


@dataclass(frozen=True)
class Idle:
    """Nothing has been requested yet."""


@dataclass(frozen=True)
class Loading:
    """A fetch is outstanding."""


@dataclass(frozen=True)
class Ready:
    reading: WeatherReading
    derived: DerivedSet


@dataclass(frozen=True)
class Failed:
    message: str


ViewState = Union[Idle, Loading, Ready, Failed]
Listener = Callable[[ViewState], None]


class WeatherViewModel:
    """
    Holds the current ViewState for one location and drives it via load().

    Every load() call takes a generation number when it starts. Its outcome
    is applied only if no later load() has started since, so when calls
    overlap the most recently issued one wins regardless of completion
    order. Listeners are called synchronously after each applied transition,
    once the lock is released; a failing listener is logged and skipped.
    """

    def __init__(self, provider: WeatherProviderBase, location_query: str):
        """
        Initialize the view model.

        Args:
            provider: Weather provider used for every load
            location_query: Fixed location passed to the provider
        """
        if not isinstance(location_query, str) or not location_query.strip():
            raise ValueError("location_query must be a non-empty string")
        self.provider = provider
        self.location_query = location_query

        self._state: ViewState = Idle()
        self._generation = 0
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()
        self.last_error: Optional[Exception] = None

    @property
    def state(self) -> ViewState:
        """Snapshot of the current state."""
        with self._lock:
            return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for state transitions; returns an unsubscribe callable."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def load(self) -> ViewState:
        """
        Fetch a fresh reading and settle in Ready or Failed.

        Any previous Ready data or error is discarded as soon as the call
        starts. Every failure, NetworkError, FormatError or anything
        unexpected, ends in the same Failed(GENERIC_FAILURE_MESSAGE) state;
        the cause is kept in last_error.

        Returns:
            ViewState: The state after this call (which may belong to a
            newer call if this one was superseded)
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            listeners = self._transition(Loading())
        self._notify(listeners, Loading())

        logging.info(f"Loading weather for {self.location_query} (generation {generation})")
        try:
            reading = self.provider.fetch_reading(self.location_query)
            derived = compute_derived(reading)
        except WeatherProviderError as e:
            logging.error(f"Weather load failed (generation {generation}): {e}")
            return self._settle(generation, Failed(GENERIC_FAILURE_MESSAGE), e)
        except Exception as e:
            logging.exception(f"Unexpected error while loading weather (generation {generation}): {e}")
            return self._settle(generation, Failed(GENERIC_FAILURE_MESSAGE), e)

        logging.info(
            f"Weather loaded: {reading.location_name} {reading.temperature}°C, "
            f"dew point {derived.dew_point_celsius}°C"
        )
        return self._settle(generation, Ready(reading=reading, derived=derived), None)

    def _settle(self, generation: int, new_state: ViewState, error: Optional[Exception]) -> ViewState:
        with self._lock:
            if generation != self._generation:
                logging.debug(
                    f"Discarding result of superseded load (generation {generation}, latest {self._generation})"
                )
                return self._state
            self.last_error = error
            listeners = self._transition(new_state)
        self._notify(listeners, new_state)
        return new_state

    def _transition(self, new_state: ViewState) -> List[Listener]:
        """Swap the state; caller holds the lock and notifies the returned listeners after releasing it."""
        logging.debug(f"View state: {type(self._state).__name__} -> {type(new_state).__name__}")
        self._state = new_state
        return list(self._listeners)

    def _notify(self, listeners: List[Listener], new_state: ViewState) -> None:
        for listener in listeners:
            try:
                listener(new_state)
            except Exception:
                logging.exception(f"State listener {listener!r} failed on {type(new_state).__name__}")
