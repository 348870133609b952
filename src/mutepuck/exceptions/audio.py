"""Audio-server-related exceptions.

This module defines exceptions for the audio registry collaborator:
- AudioServerError: Base class for audio server errors
- AudioServerConnectionError: The audio server cannot be reached
- MalformedPayloadError: The server sent a property we cannot interpret
"""

from typing import Any

from .base import MutePuckError


class AudioServerError(MutePuckError):
    """Audio server operation failed."""
    pass


class AudioServerConnectionError(AudioServerError):
    """Connecting to the audio server failed."""

    def __init__(self, client_name: str, original_error: str | None = None):
        """
        Initialize connection error.

        Args:
            client_name: Client name we tried to register with
            original_error: The original error message from the audio library
        """
        user_msg = "Cannot connect to the audio server."
        tech_msg = f"Audio server connection for client '{client_name}' failed"
        if original_error:
            tech_msg += f": {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            recoverable=False,
            recovery_hint="Make sure PipeWire (with pipewire-pulse) or PulseAudio is running for this user.",
        )
        self.client_name = client_name


class MalformedPayloadError(AudioServerError):
    """A property object carried a mute key whose value is not a boolean."""

    def __init__(self, stream_id: int, key: str, value: Any):
        """
        Initialize malformed payload error.

        Args:
            stream_id: Stream the property object belongs to
            key: Property key that was malformed
            value: The offending value
        """
        super().__init__(
            user_message=f"Audio server sent an invalid '{key}' value for stream {stream_id}.",
            technical_message=f"Stream {stream_id}: property '{key}' = {value!r} ({type(value).__name__}) is not boolean",
            recoverable=False,
        )
        self.stream_id = stream_id
        self.key = key
        self.value = value
