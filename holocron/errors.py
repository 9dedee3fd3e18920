"""Error types for Holocron."""


class HolocronError(Exception):
    """Base class for Holocron errors."""


class CodecError(HolocronError):
    """A persisted blob could not be encoded or decoded."""
