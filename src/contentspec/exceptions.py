class ParsingException(Exception):
    """A single line could not be parsed. The message is reported as a diagnostic and parsing continues."""


class IndentationException(ParsingException):
    """Indentation is invalid. Aborts the parse of the whole document."""


class InvalidKeyValueException(ValueError):
    pass
