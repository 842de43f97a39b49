"""Authentication utility functions."""

from starlette.datastructures import Headers


def extract_user_token(headers: Headers) -> str:
    """Extract the credential token from an HTTP authorization header.

    Both `Bearer <token>` and a bare token are accepted.

    Args:
        headers: The request headers.

    Returns:
        The extracted token if present, else an empty string.
    """
    authorization_header = headers.get("Authorization")
    if not authorization_header:
        return ""

    scheme_and_token = authorization_header.strip().split()
    if len(scheme_and_token) == 2 and scheme_and_token[0].lower() == "bearer":
        return scheme_and_token[1]
    if len(scheme_and_token) == 1 and scheme_and_token[0].lower() != "bearer":
        return scheme_and_token[0]
    return ""
