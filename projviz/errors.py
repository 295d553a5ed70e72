class ProjvizError(Exception):
    """Base class for every error raised by projviz."""


class SchemaError(ProjvizError):
    """Uploaded payload is not valid JSON or lacks its required top-level field."""


class ParseError(ProjvizError, ValueError):
    """A period label (month, quarter or year token) could not be parsed."""
