from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import FrozenSet, Optional

from ..config import DEFAULT_PORT


def _norm_hash(h):
    # all-digit hashes come back from YAML as ints
    if isinstance(h, int) and not isinstance(h, bool):
        h = str(h)
    if isinstance(h, str):
        return h.strip().lower()
    return h


class AppConfig(BaseModel):
    """Access-control snapshot loaded from config.yaml. Never mutated after load."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key_hashes: FrozenSet[str] = frozenset()
    admin_key_hash: Optional[str] = None
    log_invalid_tokens: bool = False
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)

    @field_validator("api_key_hashes", mode="before")
    @classmethod
    def _norm_hashes(cls, v):
        if v is None:
            return []
        if not isinstance(v, (list, tuple, set, frozenset)):
            # let pydantic report the type error
            return v
        return [_norm_hash(h) for h in v]

    @field_validator("admin_key_hash", mode="before")
    @classmethod
    def _norm_admin_hash(cls, v):
        v = _norm_hash(v)
        return None if v == "" else v

    @field_validator("port", mode="before")
    @classmethod
    def _null_port(cls, v):
        # "port:" with no value reads as null; treat it like an absent key
        return DEFAULT_PORT if v is None else v
