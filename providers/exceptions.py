# providers/exceptions.py

from engine.enums import FailureKind


class ProviderError(Exception):
    kind: FailureKind = FailureKind.unavailable


class ProviderUnavailable(ProviderError):
    kind = FailureKind.unavailable


class ProviderTimeout(ProviderError):
    kind = FailureKind.timeout


class AuthenticationFailed(ProviderError):
    kind = FailureKind.authentication


class RateLimited(ProviderError):
    kind = FailureKind.rate_limited


class ProviderServerError(ProviderError):
    kind = FailureKind.server_error


class InvalidRequest(ProviderError):
    kind = FailureKind.invalid_request


class MalformedResponse(ProviderError):
    kind = FailureKind.malformed_response


def for_status(status_code: int, detail: str) -> ProviderError:
    if status_code in (401, 403):
        return AuthenticationFailed(detail)
    if status_code == 429:
        return RateLimited(detail)
    if status_code >= 500:
        return ProviderServerError(detail)
    return InvalidRequest(detail)
