"""Auth module: bearer token to owning team resolution."""

from story_api.auth.tokens import (
    TeamTokens,
    TokenMappingError,
    fetch_team_tokens,
    load_team_tokens,
    parse_team_tokens,
    token_from_header,
)

__all__ = [
    "TeamTokens",
    "TokenMappingError",
    "fetch_team_tokens",
    "load_team_tokens",
    "parse_team_tokens",
    "token_from_header",
]
