class InfographicError(Exception):
    """Base error; the message is shown to the end user as-is."""
    status_code = 500


class InvalidRequestError(InfographicError):
    status_code = 400


class MissingCredentialsError(InfographicError):
    status_code = 401

    def __init__(self, message="Gemini API key is required."):
        super().__init__(message)


class AuthenticationError(InfographicError):
    status_code = 401


class AIServiceError(InfographicError):
    """Network, transport or provider-side failure."""
    status_code = 502


class MalformedResponseError(InfographicError):
    status_code = 502


class RenderError(InfographicError):
    status_code = 500


class ExportError(InfographicError):
    status_code = 400
