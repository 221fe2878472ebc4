class ForecasterError(Exception):
    """Base class for everything raised by the forecaster core."""


class CaptureUnavailable(ForecasterError):
    """The capture stream could not be acquired."""


class FrameReadError(ForecasterError):
    """A single frame could not be read from an acquired stream."""


class InvalidRegion(ForecasterError, ValueError):
    pass


class InvalidSensitivity(ForecasterError, ValueError):
    pass
