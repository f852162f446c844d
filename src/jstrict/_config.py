"""
Decoder configuration with immutable settings.

Limits default to the recommended production ceilings and can be selected by
environment profile (``JSTRICT_ENV``) or overridden one by one through
``JSTRICT_*`` environment variables.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace
from enum import Enum

logger = logging.getLogger(__name__)

MIB = 1024 * 1024

DEFAULT_MAX_PAYLOAD_BYTES = 10 * MIB
DEFAULT_MAX_NESTING_DEPTH = 10
DEFAULT_MAX_ARRAY_ELEMENTS = 10_000
DEFAULT_MAX_STRING_LENGTH = 1 * MIB
MAX_SUPPORTED_NESTING_DEPTH = 200

ENV_PREFIX = "JSTRICT_"


class EnvironmentProfile(Enum):
    """Deployment environments with their own limit presets."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class UnknownFieldPolicy(Enum):
    """What the binder does with object keys the schema does not declare."""

    REJECT = "reject"
    IGNORE = "ignore"


@dataclass(frozen=True)
class Limits:
    """
    Resource ceilings enforced while parsing and binding.

    Each limit is independent; all are inclusive upper bounds.
    """

    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    max_array_elements: int = DEFAULT_MAX_ARRAY_ELEMENTS
    max_string_length: int = DEFAULT_MAX_STRING_LENGTH

    def __post_init__(self) -> None:
        for name in (
            "max_payload_bytes",
            "max_nesting_depth",
            "max_array_elements",
            "max_string_length",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an integer")
            if value < 1:
                raise ValueError(f"{name} must be positive")
        # parser and binder recurse once per level
        if self.max_nesting_depth > MAX_SUPPORTED_NESTING_DEPTH:
            raise ValueError(
                "max_nesting_depth must be at most "
                f"{MAX_SUPPORTED_NESTING_DEPTH}"
            )

    @classmethod
    def for_profile(cls, profile: EnvironmentProfile) -> "Limits":
        return _PROFILE_LIMITS[profile]

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Limits":
        """
        Builds limits from ``JSTRICT_ENV`` and per-limit overrides.

        Unset variables keep the profile's value.
        """
        env = os.environ if environ is None else environ
        limits = cls.for_profile(_profile_from_env(env))

        overrides: dict[str, int] = {}
        for name in (
            "max_payload_bytes",
            "max_nesting_depth",
            "max_array_elements",
            "max_string_length",
        ):
            var = ENV_PREFIX + name.upper()
            raw = env.get(var)
            if raw is None:
                continue
            try:
                overrides[name] = int(raw)
            except ValueError as e:
                raise ValueError(
                    f"{var} must be an integer, got {raw!r}"
                ) from e

        if overrides:
            logger.debug("Limit overrides from environment: %s", overrides)
            limits = replace(limits, **overrides)
        return limits


_PROFILE_LIMITS: dict[EnvironmentProfile, Limits] = {
    EnvironmentProfile.DEVELOPMENT: Limits(
        max_payload_bytes=50 * MIB,
        max_nesting_depth=32,
        max_array_elements=100_000,
        max_string_length=10 * MIB,
    ),
    EnvironmentProfile.STAGING: Limits(),
    EnvironmentProfile.PRODUCTION: Limits(),
}


def _profile_from_env(env: Mapping[str, str]) -> EnvironmentProfile:
    raw = env.get(ENV_PREFIX + "ENV")
    if raw is None:
        return EnvironmentProfile.PRODUCTION
    try:
        return EnvironmentProfile(raw.strip().lower())
    except ValueError as e:
        choices = ", ".join(p.value for p in EnvironmentProfile)
        raise ValueError(
            f"{ENV_PREFIX}ENV must be one of {choices}, got {raw!r}"
        ) from e


@dataclass(frozen=True)
class DecodeConfig:
    """
    Configures decoding behavior with immutable settings.

    Shared read-only by every decode call that uses it.
    """

    limits: Limits = field(default_factory=Limits)
    unknown_fields: UnknownFieldPolicy = UnknownFieldPolicy.REJECT

    def __post_init__(self) -> None:
        if not isinstance(self.limits, Limits):
            raise TypeError("limits must be a Limits instance")
        if not isinstance(self.unknown_fields, UnknownFieldPolicy):
            raise TypeError("unknown_fields must be an UnknownFieldPolicy")

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None
    ) -> "DecodeConfig":
        env = os.environ if environ is None else environ
        policy = UnknownFieldPolicy.REJECT
        raw = env.get(ENV_PREFIX + "UNKNOWN_FIELDS")
        if raw is not None:
            try:
                policy = UnknownFieldPolicy(raw.strip().lower())
            except ValueError as e:
                raise ValueError(
                    f"{ENV_PREFIX}UNKNOWN_FIELDS must be 'reject' or 'ignore', "
                    f"got {raw!r}"
                ) from e
        return cls(limits=Limits.from_env(env), unknown_fields=policy)
