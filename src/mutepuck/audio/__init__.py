"""Audio server side: stream filtering and the registry collaborator."""

from .filters import DEFAULT_IGNORED_APPLICATIONS, decode_mute, is_tracked_stream
from .pulse import PulseRegistry

__all__ = ["DEFAULT_IGNORED_APPLICATIONS", "PulseRegistry", "decode_mute", "is_tracked_stream"]
