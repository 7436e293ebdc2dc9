class MalformedInputError(TypeError):
    """Raised when a caller passes something the renderer cannot work with.

    This is a programmer error (non-string message, missing grid, unknown
    font), not a user-facing validation failure.
    """
