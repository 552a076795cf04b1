"""Token-to-team mapping and bearer credential resolution.

The mapping is loaded once at startup, from TEAM_TOKENS or from the NADA
backend, and is read-only afterwards. Every way a credential can fail
(missing header, wrong shape, unknown token) raises the same Unauthorized
error, so callers cannot probe the mapping.

Examples:
    >>> tokens = TeamTokens({"s3cret": "finance"})
    >>> tokens.resolve("Bearer s3cret")
    'finance'
    >>> tokens.resolve("s3cret")
    Traceback (most recent call last):
    ...
    story_api.stories.errors.Unauthorized: missing or invalid authorization token
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

import httpx
from pydantic import TypeAdapter, ValidationError

from story_api.config import Settings
from story_api.stories.errors import Unauthorized

logger = logging.getLogger(__name__)

_MAPPING_ADAPTER = TypeAdapter(dict[str, str])


class TokenMappingError(Exception):
    """The token-to-team mapping could not be loaded."""


def token_from_header(header: str | None) -> str:
    """Extract the token from an Authorization header value.

    The value must split on single spaces into exactly a scheme and a
    token. The scheme itself is not checked.

    Args:
        header: Raw Authorization header value, or None if absent.

    Returns:
        The token component.

    Raises:
        Unauthorized: If the header is absent or malformed.
    """
    if not header:
        raise Unauthorized()
    parts = header.split(" ")
    if len(parts) != 2 or not parts[1]:
        raise Unauthorized()
    return parts[1]


class TeamTokens:
    """Immutable mapping from bearer token to owning team."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = MappingProxyType(dict(mapping))

    def __len__(self) -> int:
        return len(self._mapping)

    @property
    def teams(self) -> list[str]:
        """Distinct team names, sorted."""
        return sorted(set(self._mapping.values()))

    def resolve(self, header: str | None) -> str:
        """Resolve an Authorization header value to a team.

        Raises:
            Unauthorized: If the header is absent, malformed or the token
                is unknown.
        """
        token = token_from_header(header)
        team = self._mapping.get(token)
        if team is None:
            raise Unauthorized()
        return team


def parse_team_tokens(payload: bytes | str) -> TeamTokens:
    """Parse a JSON object of token to team.

    Raises:
        TokenMappingError: If the payload is not a JSON object of strings.
    """
    try:
        mapping = _MAPPING_ADAPTER.validate_json(payload)
    except ValidationError as e:
        raise TokenMappingError(f"Invalid token mapping: {e.error_count()} error(s)") from e
    return TeamTokens(mapping)


def fetch_team_tokens(
    url: str,
    token: str,
    timeout: float = 10.0,
    client: httpx.Client | None = None,
) -> TeamTokens:
    """Fetch the token-to-team mapping from the NADA backend.

    Args:
        url: Endpoint returning the mapping as a JSON object.
        token: Bootstrap bearer token for the endpoint.
        timeout: Request timeout in seconds.
        client: Optional preconfigured httpx client.

    Returns:
        The loaded mapping.

    Raises:
        TokenMappingError: On transport failure, non-2xx status or invalid
            payload.
    """
    headers = {"Authorization": f"Bearer {token}"}
    try:
        if client is not None:
            response = client.get(url, headers=headers, timeout=timeout)
        else:
            response = httpx.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise TokenMappingError(f"Fetching token mapping from {url} failed: {e}") from e

    return parse_team_tokens(response.content)


def load_team_tokens(settings: Settings, client: httpx.Client | None = None) -> TeamTokens:
    """Load the mapping from the configured source.

    TEAM_TOKENS takes precedence over NADA_BACKEND_URL.

    Raises:
        TokenMappingError: If no source is configured or loading fails.
    """
    if settings.TEAM_TOKENS is not None:
        logger.info("Using static token mapping from TEAM_TOKENS")
        tokens = TeamTokens(settings.TEAM_TOKENS)
    elif settings.NADA_BACKEND_URL:
        logger.info(f"Fetching token mapping from {settings.NADA_BACKEND_URL}")
        tokens = fetch_team_tokens(
            settings.NADA_BACKEND_URL,
            settings.NADA_BACKEND_TOKEN or "",
            timeout=settings.TOKEN_FETCH_TIMEOUT,
            client=client,
        )
    else:
        raise TokenMappingError("No token mapping source: set TEAM_TOKENS or NADA_BACKEND_URL")

    logger.info(f"Loaded token mapping for {len(tokens.teams)} team(s)")
    return tokens
