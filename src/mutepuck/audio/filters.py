"""Which audio server objects take part in the mute vote."""

import logging
from collections.abc import Collection, Mapping
from typing import Any, Optional

from mutepuck.exceptions import MalformedPayloadError

logger = logging.getLogger(__name__)

INPUT_STREAM_CLASS = "Stream/Input/Audio"
MANAGER_CATEGORY = "Manager"
DEFAULT_IGNORED_APPLICATIONS = ("GNOME Settings", "PulseAudio Volume Control")


def is_tracked_stream(
    properties: Mapping[str, str],
    ignored_applications: Collection[str] = DEFAULT_IGNORED_APPLICATIONS,
) -> bool:
    """
    Decide whether an audio object is a real recording stream.

    Volume control panels create input streams of their own (to draw level
    meters). Newer servers tag them with media.category "Manager"; older
    ones do not, so a denylist of known mixer applications backs that up.
    This is a heuristic and may miss unknown mixers.

    Args:
        properties: Property list of the object
        ignored_applications: Application names never tracked

    Returns:
        True if the stream should be tracked
    """
    media_class = properties.get("media.class")
    if media_class is not None and media_class != INPUT_STREAM_CLASS:
        return False

    if properties.get("media.category", "") == MANAGER_CATEGORY:
        return False

    application_name = properties.get("application.name", "UNKNOWN")
    if application_name in ignored_applications:
        logger.debug(f"Ignoring input stream of '{application_name}'")
        return False

    return True


def decode_mute(stream_id: int, value: Any, key: str = "mute") -> Optional[bool]:
    """
    Interpret a mute property value.

    Args:
        stream_id: Stream the value belongs to (for error reporting)
        value: Raw property value, None when the property is absent
        key: Property key (for error reporting)

    Returns:
        The mute flag, or None when the property is absent

    Raises:
        MalformedPayloadError: The property is present but not boolean
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    # The PulseAudio protocol carries booleans as 0/1 integers
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise MalformedPayloadError(stream_id, key, value)
