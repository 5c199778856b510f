"""
OS-keychain storage for the GitHub release token.

With the ``[keyring]`` extra installed, ``token set --keyring`` (or
``save_config(..., use_keyring=True)``) moves the token into the keychain and
persists only a placeholder in its place::

    keyring:plugin-updater:github_token

Wherever a token value is read (the ``rank_math_api_github_token`` option or
``[github] token`` in config.toml), ``resolve_token_option()`` turns it into
the usable token: placeholders are looked up, plain values are stripped,
anything else is ``None``.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger()

SERVICE_NAME = "plugin-updater"
KEYRING_PREFIX = "keyring:"
TOKEN_KEY = "github_token"


def placeholder_for(key: str = TOKEN_KEY) -> str:
    return f"{KEYRING_PREFIX}{SERVICE_NAME}:{key}"


def is_keyring_placeholder(value: object) -> bool:
    return isinstance(value, str) and value.startswith(KEYRING_PREFIX)


def is_keyring_available() -> bool:
    """Return True if a usable (non-fail, non-null) keyring backend is installed."""
    try:
        import keyring

        name = type(keyring.get_keyring()).__name__.lower()
    except Exception:  # noqa: BLE001
        return False
    return "fail" not in name and "null" not in name


def store_token(token: str, key: str = TOKEN_KEY) -> str:
    """Put *token* in the keychain and return the placeholder to persist instead."""
    import keyring

    keyring.set_password(SERVICE_NAME, key, token)
    logger.info("github_token_moved_to_keyring", key=key)
    return placeholder_for(key)


def resolve_token_option(value: object) -> str | None:
    """Usable token for a persisted token value, or ``None``.

    A placeholder whose keychain entry is missing or unreadable resolves to
    ``None``, so the check falls back to the next token source.
    """
    if is_keyring_placeholder(value):
        assert isinstance(value, str)
        service, _, key = value[len(KEYRING_PREFIX) :].partition(":")
        if not service or not key:
            logger.warning("github_token_placeholder_malformed")
            return None
        try:
            import keyring

            value = keyring.get_password(service, key)
        except Exception:  # noqa: BLE001
            logger.warning("github_token_keyring_unreadable", service=service, key=key)
            return None
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def forget_token(key: str = TOKEN_KEY) -> None:
    """Remove the keychain entry, if any.  Missing entries and backends are ignored."""
    try:
        import keyring

        keyring.delete_password(SERVICE_NAME, key)
    except Exception:  # noqa: BLE001
        logger.debug("github_token_keyring_delete_skipped", key=key)
        return
    logger.info("github_token_removed_from_keyring", key=key)
