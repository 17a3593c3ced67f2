"""Random-walk price source that emits one observation per cadence tick."""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Protocol

from candle_stream.core.time_utils import epoch_seconds
from candle_stream.core.types import Observation

logger = logging.getLogger(__name__)

ObservationListener = Callable[[Observation], None]


class UniformSource(Protocol):
    def uniform(self, a: float, b: float) -> float: ...


@dataclass(slots=True)
class PriceState:
    """Mutable current price owned by a single TickSource."""

    current: float


class TickSource:
    """Produces the price evolution and accepts buy/sell shocks.

    ``advance`` is the only operation that emits observations. Shocks only
    mutate the current price; listeners see them through the next tick.
    """

    def __init__(
        self,
        initial_price: float,
        *,
        jitter: float = 1.0,
        price_floor: float = 0.0,
        buy_multiplier: float = 1.05,
        sell_multiplier: float = 0.95,
        clock: Callable[[], float] = epoch_seconds,
        rng: UniformSource | None = None,
    ) -> None:
        self.jitter = jitter
        self.price_floor = price_floor
        self.buy_multiplier = buy_multiplier
        self.sell_multiplier = sell_multiplier
        self._clock = clock
        self._rng: UniformSource = rng if rng is not None else random.Random()
        self._state = PriceState(current=max(price_floor, initial_price))
        self._listeners: list[ObservationListener] = []

    @property
    def price(self) -> float:
        return self._state.current

    def subscribe(self, listener: ObservationListener) -> None:
        """Register a callable that receives every emitted observation."""

        self._listeners.append(listener)

    def advance(self) -> Observation:
        """Step the random walk once and emit the new observation."""

        delta = self._rng.uniform(-self.jitter, self.jitter)
        self._state.current = max(self.price_floor, self._state.current + delta)
        observation = Observation(timestamp=self._clock(), price=self._state.current)
        logger.debug(
            "tick_advanced",
            extra={"timestamp": observation.timestamp, "price": observation.price},
        )
        for listener in self._listeners:
            listener(observation)
        return observation

    def apply_shock(self, multiplier: float) -> float:
        """Multiply the current price immediately without emitting an observation."""

        previous = self._state.current
        self._state.current = max(self.price_floor, previous * multiplier)
        logger.info(
            "price_shock",
            extra={"multiplier": multiplier, "previous": previous, "price": self._state.current},
        )
        return self._state.current

    def buy(self) -> float:
        return self.apply_shock(self.buy_multiplier)

    def sell(self) -> float:
        return self.apply_shock(self.sell_multiplier)
