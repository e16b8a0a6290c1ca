# mtree - config.py
# Copyright (C) 2025 The Axiom Contributors
# This program is licensed under the Peer Production License (PPL).
# See the LICENSE file for full details.
"""Tree configuration: hash width, engine and bit encoding."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from typing_extensions import Self

from mtree.combiner import BitEncoding, Combiner
from mtree.constants import (
    DEFAULT_ENGINE,
    ENV_BIT_ENCODING,
    ENV_ENGINE,
    ENV_HASH_BYTES,
    HASH_BYTES,
    LOG_FORMAT,
    MIN_HASH_BITS,
)
from mtree.errors import ConfigurationError
from mtree.hash_engine import ENGINES, HashEngine, get_engine

logger = logging.getLogger("mtree.config")
if not logger.handlers:
    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stdout_handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


class TreeConfig(BaseModel):
    """Used as a checkpoint between user input and the tree builder."""

    model_config = ConfigDict(frozen=True)

    hash_bytes: int = HASH_BYTES
    engine: str = DEFAULT_ENGINE
    bit_encoding: BitEncoding = BitEncoding.PACKED

    @field_validator("hash_bytes")
    @classmethod
    def _secure_width(cls, value: int) -> int:
        if value * 8 < MIN_HASH_BITS:
            raise ValueError(
                f"hash_bytes must give at least {MIN_HASH_BITS} bits, got {value}",
            )
        return value

    @field_validator("engine")
    @classmethod
    def _known_engine(cls, value: str) -> str:
        if value not in ENGINES:
            raise ValueError(
                f"unknown hash engine {value!r}, expected one of {sorted(ENGINES)}",
            )
        return value

    @classmethod
    def create(cls, **values: object) -> Self:
        """Validate `values`, turning pydantic errors into ConfigurationError."""
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            message = f"invalid tree configuration ({e})"
            logger.error(message)
            raise ConfigurationError(message) from e

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """Build a configuration, letting environment variables override defaults.

        If defined, MTREE_HASH_BYTES, MTREE_ENGINE and MTREE_BIT_ENCODING
        are used. If not, the standard defaults apply.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if ENV_HASH_BYTES in env:
            raw = env[ENV_HASH_BYTES]
            try:
                values["hash_bytes"] = int(raw)
            except ValueError as e:
                message = f"{ENV_HASH_BYTES} must be an integer, got {raw!r}"
                logger.error(message)
                raise ConfigurationError(message) from e
        if ENV_ENGINE in env:
            values["engine"] = env[ENV_ENGINE].strip().lower()
        if ENV_BIT_ENCODING in env:
            values["bit_encoding"] = env[ENV_BIT_ENCODING].strip().lower()
        return cls.create(**values)

    def hash_engine(self) -> HashEngine:
        """Return the configured hash engine."""
        return get_engine(self.engine)

    def combiner(self) -> Combiner:
        """Return a combiner matching this configuration."""
        return Combiner(
            engine=self.hash_engine(),
            hash_bytes=self.hash_bytes,
            encoding=self.bit_encoding,
        )
