"""
Verifier configuration.

Request-independent limits only. Signature labels and key material are
always supplied by the caller.
"""

import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "JWS_JCS_"


class VerifierConfig(BaseModel):
    """Limits applied to every validation request."""

    max_document_bytes: int = Field(
        16 * 1024 * 1024,
        gt=0,
        description="Largest accepted signed document, in bytes."
    )
    max_nesting_depth: int = Field(
        128,
        gt=0,
        le=512,
        description="Deepest accepted nesting of objects and arrays."
    )
    allowed_algorithms: Optional[List[str]] = Field(
        None,
        description="Allow-list narrowing the algorithm registry (None allows all)."
    )

    @field_validator("allowed_algorithms")
    @classmethod
    def validate_allowed_algorithms(cls, v):
        """Reject identifiers unknown to the registry."""
        if v is None:
            return v
        from jws_jcs.core.algorithms import ALGORITHMS

        unknown = [name for name in v if name not in ALGORITHMS]
        if unknown:
            raise ValueError(f"Unknown algorithms: {', '.join(unknown)}")
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "VerifierConfig":
        """Build a configuration from ``JWS_JCS_*`` environment variables."""
        environ = os.environ if environ is None else environ
        values = {}
        for field_name in ("max_document_bytes", "max_nesting_depth"):
            raw = environ.get(ENV_PREFIX + field_name.upper())
            if raw is not None:
                values[field_name] = raw
        algorithms = environ.get(ENV_PREFIX + "ALLOWED_ALGORITHMS")
        if algorithms:
            values["allowed_algorithms"] = [
                name.strip() for name in algorithms.split(",") if name.strip()
            ]
        return cls(**values)
