"""Messages crossing the thread boundary into the dispatcher."""

from dataclasses import dataclass
from typing import Optional, Union

from .enums import Event, State


@dataclass(frozen=True)
class Message:
    """
    Tagged value carrying either an aggregate state or a hardware event.

    Exactly one of ``state`` or ``event`` is set. Use the ``of_state``
    and ``of_event`` constructors rather than building one directly.
    """

    payload: Union[State, Event]

    def __post_init__(self) -> None:
        if not isinstance(self.payload, (State, Event)):
            raise TypeError(f"Message payload must be State or Event, got {type(self.payload).__name__}")

    @classmethod
    def of_state(cls, state: State) -> "Message":
        """Wrap an aggregate state update."""
        return cls(state)

    @classmethod
    def of_event(cls, event: Event) -> "Message":
        """Wrap a button or hotplug event."""
        return cls(event)

    @property
    def state(self) -> Optional[State]:
        return self.payload if isinstance(self.payload, State) else None

    @property
    def event(self) -> Optional[Event]:
        return self.payload if isinstance(self.payload, Event) else None

    def __repr__(self) -> str:
        kind = "State" if self.state is not None else "Event"
        return f"Message.{kind}({self.payload.name})"
