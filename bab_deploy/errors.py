"""Exceptions raised while preparing or submitting a contract verification."""


class VerificationError(Exception):
    """Base class for every error surfaced to the operator."""


class ConfigurationError(VerificationError):
    """Missing or invalid network URL, credential, or build artifact."""


class RequestError(VerificationError):
    """Malformed contract address or constructor arguments."""


class RemoteVerificationError(VerificationError):
    """The block explorer rejected or could not process the request."""

    def __init__(self, message: str, response: dict | None = None):
        super().__init__(message)
        self.response = response


class AddressNotFound(RemoteVerificationError):
    """No contract code exists at the requested address."""


class BytecodeMismatch(RemoteVerificationError):
    """Compiled source plus constructor arguments do not reproduce the deployed code."""


class AlreadyVerified(RemoteVerificationError):
    """The explorer already holds verified source for the address."""


class ServiceUnavailable(RemoteVerificationError):
    """The RPC node or explorer API could not be reached or answered garbage."""
