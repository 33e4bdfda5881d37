"""AWS credential and API error description utilities.

Turns botocore failures that escape the pipeline (STS, S3) into clear,
actionable messages for the run's failure report instead of raw SDK text.
"""

from __future__ import annotations

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
)

# Error codes returned by AWS STS / S3 when credentials are bad.
_CREDENTIAL_ERROR_CODES = frozenset(
    {
        "ExpiredTokenException",
        "ExpiredToken",
        "InvalidIdentityToken",
        "IDPCommunicationError",
        "IDPRejectedClaim",
        "InvalidClientTokenId",
        "SignatureDoesNotMatch",
        "AccessDenied",
        "AccessDeniedException",
    }
)

_MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "NoSuchBucket", "404"})


def error_code(exc: BaseException) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "")
    return ""


def is_credential_error(exc: BaseException) -> bool:
    """Return True if *exc* is an AWS credential / token related error."""
    if isinstance(exc, NoCredentialsError):
        return True
    return error_code(exc) in _CREDENTIAL_ERROR_CODES


def describe_aws_error(exc: BaseException) -> str:
    """Return a user-friendly message for an AWS SDK error."""
    code = error_code(exc)

    if isinstance(exc, NoCredentialsError):
        return "AWS credentials not found. Web identity role assumption did not provide credentials."
    if code in ("ExpiredTokenException", "ExpiredToken"):
        return f"AWS web identity token expired: {exc}"
    if code in ("InvalidIdentityToken", "IDPRejectedClaim", "IDPCommunicationError"):
        return (
            f"The OIDC token was rejected by AWS STS ({code}). "
            "Check the role trust policy for this repository."
        )
    if code in ("AccessDenied", "AccessDeniedException"):
        return (
            f"Access denied: {exc}. "
            "Check IAM permissions of the bootstrap role."
        )
    if code in _MISSING_OBJECT_CODES:
        return f"Mapping document not found: {exc}"

    return f"AWS request failed: {exc}"


def is_aws_error(exc: BaseException) -> bool:
    return isinstance(exc, (BotoCoreError, ClientError))
