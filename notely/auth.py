"""
Notely Backend: API Key Extraction
==================================

What:  Parses the ``Authorization`` header into a raw API key.
How:   Pure function of the request headers; no I/O and no shared state, so
       it is safe to call from any number of concurrent requests.

Wire format:
    Authorization: ApiKey <key>

    - The scheme token ``ApiKey`` is compared byte for byte
      (``apikey`` and ``APIKEY`` are malformed).
    - The value is split on single ASCII spaces; the key is the second piece.
    - Pieces after the second are ignored.
    - ``"ApiKey "`` yields the empty key. The extractor does not reject it;
      the identity store simply never matches it.
"""

from typing import Mapping, Optional, Protocol, Union

from starlette.datastructures import Headers

from notely.exceptions import MalformedCredentialError, MissingCredentialError
from notely.models.user import User

AUTHORIZATION_HEADER = "Authorization"
API_KEY_SCHEME = "ApiKey"


def get_api_key(headers: Union[Headers, Mapping[str, str]]) -> str:
    """
    Extract the API key from request headers.

    Args:
        headers: Starlette ``Headers`` or any ``str -> str`` mapping. Plain
                 mappings are wrapped in ``Headers`` so the header name is
                 matched case-insensitively. If the header was sent more than
                 once only the first value is used.

    Returns:
        The second space-separated token of the header value (may be "").

    Raises:
        MissingCredentialError: header absent or empty
        MalformedCredentialError: fewer than two tokens, or scheme is not ``ApiKey``
    """
    if not isinstance(headers, Headers):
        headers = Headers(headers=dict(headers))

    auth_header = headers.get(AUTHORIZATION_HEADER)
    if not auth_header:
        raise MissingCredentialError()

    split_auth = auth_header.split(" ")
    if len(split_auth) < 2 or split_auth[0] != API_KEY_SCHEME:
        raise MalformedCredentialError()

    return split_auth[1]


class IdentityResolver(Protocol):
    """
    Lookup capability consumed by the Auth Guard.

    Implementations must be safe for concurrent calls.
    """

    async def resolve(self, api_key: str) -> Optional[User]:
        """
        Return the user owning ``api_key``, or ``None`` if there is none.

        Raises:
            DatabaseError: the store itself failed (not a "not found")
        """
        ...
