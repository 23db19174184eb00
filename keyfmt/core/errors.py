"""Error hierarchy for key discovery and conversion."""


class KeyfmtError(Exception):
    """Base class for every terminal keyfmt failure."""


class InputIOError(KeyfmtError):
    """Reading the input stream or a password file failed."""


class OutputIOError(KeyfmtError):
    """Writing the output stream failed."""


class UnknownKeyTypeError(KeyfmtError):
    """No discovery probe could classify the input bytes."""

    def __init__(self, message: str = "Unknown key type") -> None:
        super().__init__(message)


class MissingInputError(KeyfmtError):
    """A required input, such as a password, was not supplied."""

    def __init__(self, what: str) -> None:
        super().__init__(f"Missing input: {what}")
        self.what = what


class BadContainerError(KeyfmtError):
    """A container matched but its inner ASN.1 structure is malformed."""


class DecryptionError(BadContainerError):
    """An encrypted PKCS8 container could not be decrypted."""


class TypeMismatchError(KeyfmtError):
    """A public key cannot be converted into private key material."""

    def __init__(
        self, message: str = "Cannot convert a public key to a private key"
    ) -> None:
        super().__init__(message)


class NotSupportedError(KeyfmtError):
    """The requested conversion path or encoding is not available."""


class UnknownAlgorithmError(NotSupportedError):
    """The key algorithm could not be determined."""


class BadPasswordArgError(KeyfmtError):
    """A password argument is not of the form pass:<value> or file:<path>."""
