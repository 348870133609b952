"""Daemon configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from mutepuck.utils.persistence import PydanticPersistence

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "mutepuck" / "config.json"


class PuckConfig(BaseModel):
    """Hardware, hotplug and audio-server settings for the mute puck."""

    # Device identity
    vendor_id: int = Field(default=0x20A0, ge=0, le=0xFFFF, description="USB vendor id of the puck")
    product_id: int = Field(default=0x42DA, ge=0, le=0xFFFF, description="USB product id of the puck")

    # Input report decoding
    report_length: int = Field(default=8, ge=4, description="Size of one input report in bytes")
    press_codes: frozenset[int] = Field(
        default=frozenset({4}),
        description="Values of input report byte 3 that mean 'button pressed'",
    )
    release_codes: frozenset[int] = Field(
        default=frozenset({0}),
        description=(
            "Values of input report byte 3 that mean 'button released'. "
            "Firmware revisions differ (0 or 2); list only the code your "
            "puck sends once per release."
        ),
    )
    read_timeout_ms: int = Field(
        default=500,
        ge=0,
        description="Input report read timeout; bounds how long shutdown waits for the reader (0 = block)",
    )

    # Hotplug
    hotplug_subsystem: str = Field(default="hidraw", description="udev subsystem to watch for device changes")
    hotplug_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Retry opening the device after this many seconds without a hotplug event (None = wait forever)",
    )

    # Audio server
    client_name: str = Field(default="mutepuck", description="Client name announced to the audio server")
    audio_poll_interval: float = Field(
        default=0.25,
        gt=0,
        description=(
            "Upper bound (seconds) on one audio event wait; also bounds the "
            "button latency if a wakeup races with the start of a wait"
        ),
    )
    ignored_applications: list[str] = Field(
        default_factory=lambda: ["GNOME Settings", "PulseAudio Volume Control"],
        description="Applications whose input streams never take part in the mute vote",
    )

    @field_validator("press_codes", "release_codes")
    @classmethod
    def validate_codes(cls, codes: frozenset[int]) -> frozenset[int]:
        """Report codes are single bytes."""
        bad = sorted(code for code in codes if not 0 <= code <= 0xFF)
        if bad:
            raise ValueError(f"report codes must be between 0 and 255, got {bad}")
        return codes

    @model_validator(mode="after")
    def validate_disjoint_codes(self) -> "PuckConfig":
        """A code cannot mean both press and release."""
        overlap = self.press_codes & self.release_codes
        if overlap:
            raise ValueError(f"press_codes and release_codes overlap: {sorted(overlap)}")
        return self

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "PuckConfig":
        """
        Load config from file or return defaults.

        The file is optional and never created automatically.

        Args:
            path: Path to config file. If None, uses the default location
                  (~/.config/mutepuck/config.json).

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH

        return PydanticPersistence.load_json_or_default(path, cls)
