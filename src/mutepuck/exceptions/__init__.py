"""
Custom exception hierarchy for mutepuck.

## Exception Hierarchy

```
MutePuckError (base)
├── DeviceError
│   ├── DeviceNotFoundError      (puck unplugged, retried)
│   └── DeviceAccessError        (HID layer unusable, fatal)
├── AudioServerError
│   ├── AudioServerConnectionError
│   └── MalformedPayloadError
├── WorkerFailedError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

All custom exceptions inherit from `MutePuckError`, which provides
`user_message`, `technical_message`, `recoverable` and `recovery_hint`.

### Example: Unplugged Device

```python
from mutepuck.exceptions import DeviceNotFoundError

try:
    handle = transport.open()
except DeviceNotFoundError as e:
    logger.debug(e.technical_message)  # wait for the next hotplug event
```

See `mutepuck.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .audio import AudioServerConnectionError, AudioServerError, MalformedPayloadError
from .base import MutePuckError, WorkerFailedError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .device import DeviceAccessError, DeviceError, DeviceNotFoundError
from .handlers import ErrorContext, format_error_for_display, wrap_pydantic_error

__all__ = [
    # Audio
    "AudioServerConnectionError",
    "AudioServerError",
    "MalformedPayloadError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Device
    "DeviceAccessError",
    "DeviceError",
    "DeviceNotFoundError",
    # Base
    "MutePuckError",
    "WorkerFailedError",
    # Handlers
    "ErrorContext",
    "format_error_for_display",
    "wrap_pydantic_error",
]
