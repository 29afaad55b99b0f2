"""Error taxonomy for credential, amount, and configuration failures.

Every error carries a stable ``code`` that the service layer copies into
``ServiceError.code``.  All of them are detected before any network
submission begins, so a failure here never leaves a partial transfer.
"""

from __future__ import annotations


class WalletError(Exception):
    """Base class for all handled wmgr failures."""

    code: str = "wallet_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# --- Configuration ---


class ConfigurationError(WalletError):
    """Missing or conflicting options, or an unknown registry name."""

    code = "configuration_error"


class AmbiguousCredentialSource(ConfigurationError):
    code = "ambiguous_credential_source"


class UnknownNetworkName(ConfigurationError):
    code = "unknown_network"


class UnknownDerivationProfile(ConfigurationError):
    code = "unknown_derivation_profile"


class InvalidAddress(ConfigurationError):
    code = "invalid_address"


# --- Credential format ---


class CredentialFormatError(WalletError):
    """A credential was supplied but its content is unusable."""

    code = "credential_format_error"


class KeyfileNotFound(CredentialFormatError):
    code = "keyfile_not_found"


class KeyfileMalformed(CredentialFormatError):
    code = "keyfile_malformed"


class InvalidMnemonic(CredentialFormatError):
    code = "invalid_mnemonic"


class InvalidPrivateKeyFormat(CredentialFormatError):
    code = "invalid_private_key"


# --- External secret provider ---


class SecretProviderError(WalletError):
    """The external secret provider could not supply a secret."""

    code = "secret_provider_error"


class SecretProviderUnavailable(SecretProviderError):
    code = "secret_provider_unavailable"


class SecretProviderProtocolError(SecretProviderError):
    code = "secret_provider_protocol_error"


class SecretProviderDenied(SecretProviderError):
    """Structured response reported ``ok: false``.

    ``provider_code`` holds the provider's own error code.
    """

    code = "secret_provider_denied"

    def __init__(self, message: str, *, provider_code: str = "svpi_error") -> None:
        super().__init__(message)
        self.provider_code = provider_code


# --- Derivation / amounts ---


class DerivationError(WalletError):
    code = "derivation_error"


class DerivationFailed(DerivationError):
    code = "derivation_failed"


class AmountFormatError(WalletError):
    code = "amount_format_error"


class InvalidAmountFormat(AmountFormatError):
    code = "invalid_amount"
