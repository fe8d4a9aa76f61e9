"""Object key generation for profile images."""

from collections.abc import Callable
import re
import secrets

from core.utils.constants import (
    FALLBACK_KEY_LABEL,
    KEY_SUFFIX_UPPER_BOUND,
    PROFILE_IMAGE_KEY_EXTENSION,
    PROFILE_IMAGE_KEY_PREFIX,
)

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")


def sanitize_label(label: str) -> str:
    """Lower-case `label` and drop everything outside [a-z0-9]."""
    return _NON_ALPHANUMERIC.sub("", label.lower())


class AssetKeyGenerator:
    """Builds keys of the form ``pp/<label>-<n>.jpg``.

    Keys are readable, not unique: the suffix is drawn from [0, 10000), so two
    uploads for the same label can collide.
    """

    def __init__(self, randbelow: Callable[[int], int] | None = None) -> None:
        self._randbelow = randbelow or secrets.randbelow

    def generate_key(self, owner_label: str) -> str:
        label = sanitize_label(owner_label or "") or FALLBACK_KEY_LABEL
        suffix = self._randbelow(KEY_SUFFIX_UPPER_BOUND)
        return f"{PROFILE_IMAGE_KEY_PREFIX}/{label}-{suffix}.{PROFILE_IMAGE_KEY_EXTENSION}"
