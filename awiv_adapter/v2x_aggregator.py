"""Aggregation of V2X infrastructure commands and traffic light states."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol, Sequence, TypeVar, Union

logger = logging.getLogger(__name__)


class _Clock(Protocol):
    def now(self) -> float: ...


@dataclass(frozen=True)
class InfrastructureCommand:
    """A command sent to one piece of infrastructure."""

    type: str = ""
    id: str = ""
    state: int = 0
    stamp: float = 0.0


@dataclass(frozen=True)
class InfrastructureCommandArray:
    """A timestamped collection of infrastructure commands."""

    commands: Sequence[InfrastructureCommand] = ()
    stamp: float = 0.0


@dataclass(frozen=True)
class VirtualTrafficLightState:
    """State reported by one virtual traffic light."""

    type: str = ""
    id: str = ""
    approval: bool = False
    is_finalized: bool = False
    stamp: float = 0.0


@dataclass(frozen=True)
class VirtualTrafficLightStateArray:
    """A timestamped collection of virtual traffic light states."""

    states: Sequence[VirtualTrafficLightState] = ()
    stamp: float = 0.0


_Item = TypeVar("_Item", InfrastructureCommand, VirtualTrafficLightState)


def _key(item: Union[InfrastructureCommand, VirtualTrafficLightState]) -> str:
    return f"{item.type}-{item.id}"


@dataclass
class V2XAggregator:
    """Remembers the latest message per (type, id) and yields the fresh ones."""

    clock: _Clock
    max_delay_sec: float = 5.0
    max_clock_error_sec: float = 300.0
    _commands: dict[str, InfrastructureCommand] = field(default_factory=dict, repr=False)
    _states: dict[str, VirtualTrafficLightState] = field(default_factory=dict, repr=False)

    def _valid(self, store: dict[str, _Item], kind: str) -> tuple[_Item, ...]:
        valid = []
        for key in sorted(store):
            item = store[key]
            delay = self.clock.now() - item.stamp
            if delay < -self.max_clock_error_sec:
                logger.debug(
                    "future %s: delay=%f, max_clock_error=%f",
                    kind, delay, self.max_clock_error_sec,
                )
                continue
            if delay > self.max_delay_sec:
                logger.debug(
                    "old %s: delay=%f, max_delay_sec=%f", kind, delay, self.max_delay_sec
                )
                continue
            valid.append(item)
        return tuple(valid)

    def update_commands(self, msg: InfrastructureCommandArray) -> InfrastructureCommandArray:
        """Store received commands and return every command still valid."""
        for command in msg.commands:
            self._commands[_key(command)] = command
        stamp = self.clock.now()
        return InfrastructureCommandArray(
            commands=self._valid(self._commands, "command"), stamp=stamp
        )

    def update_states(self, msg: VirtualTrafficLightStateArray) -> VirtualTrafficLightStateArray:
        """Store received states and return every state still valid."""
        for state in msg.states:
            self._states[_key(state)] = state
        stamp = self.clock.now()
        return VirtualTrafficLightStateArray(
            states=self._valid(self._states, "state"), stamp=stamp
        )