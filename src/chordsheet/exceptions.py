class ChordsheetError(Exception):
    """Base exception for chordsheet."""


class ChordParseError(ChordsheetError):
    """Raised when text cannot be read as a note or chord symbol."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse {text!r}: {reason}")


class ImportFormatError(ChordsheetError):
    """Raised when tab content cannot be found in a saved page."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Import failed: {reason}")
