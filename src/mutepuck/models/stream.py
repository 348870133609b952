"""Tracked audio input stream model."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class StreamEntry:
    """
    One tracked audio input stream.

    Attributes:
        stream_id: Server-assigned id, unique for the stream's lifetime
        mute: Last-known mute flag reported by the audio server
        application_name: Application owning the stream (for logging)
    """

    stream_id: int
    mute: bool = False
    application_name: str = ""

    def with_mute(self, mute: bool) -> "StreamEntry":
        """Return a copy carrying a new mute flag."""
        return replace(self, mute=mute)
