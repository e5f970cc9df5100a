import os
import re
from typing import Dict, Optional

from pydantic import BaseModel, field_validator, ValidationError

from codec.batch import CountRadix
from codec.feed_size import SizeTableMode

_FELT_RE = re.compile(r"^0x[0-9a-fA-F]{1,64}$")


class CodecCfg(BaseModel):
    size_table: SizeTableMode = SizeTableMode.ASSET_CLASS_GATED
    count_radix: CountRadix = CountRadix.DECIMAL


class Deployment(BaseModel):
    oracle: Optional[str] = None
    checkpoint_oracle: Optional[str] = None
    future_oracle: Optional[str] = None
    vrf: Optional[str] = None
    oracle_assertions: Optional[str] = None
    hyperlane_mailbox: Optional[str] = None

    @field_validator("*")
    @classmethod
    def must_be_felt(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not _FELT_RE.match(v):
            raise ValueError(f"contract address must be a 0x prefixed felt, got {v!r}")
        return v


class Settings(BaseModel):
    network: str = "starknet-mainnet"
    skip_failed_events: bool = False
    codec: CodecCfg = CodecCfg()
    deployments: Dict[str, Deployment] = {}

    @property
    def deployment(self) -> Deployment:
        try:
            return self.deployments[self.network]
        except KeyError:
            raise RuntimeError(f"no deployment configured for network {self.network}") from None

    def contract(self, role: str) -> str:
        addr = getattr(self.deployment, role, None)
        if not addr:
            raise RuntimeError(f"no {role} contract configured for network {self.network}")
        return addr


def load_settings(path: str = "config.yaml") -> Settings:
    import yaml
    with open(path, "r") as f:
        cfg = yaml.safe_load(f) or {}

    # allow picking the deployment via env at runtime
    env_network = os.environ.get("TRANSFORM_NETWORK")
    if env_network:
        cfg["network"] = env_network

    try:
        return Settings.model_validate(cfg)
    except ValidationError as e:
        raise RuntimeError(f"Configuration error in {path}: {e}") from e
