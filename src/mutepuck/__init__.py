"""mutepuck: keep a USB mute button in sync with the audio server's recording streams."""

__version__ = "0.1.0"
