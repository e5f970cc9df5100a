import pathlib

import pytest

from codec import CountRadix, SizeTableMode
from common.settings import Deployment, Settings, load_settings
from etl.transform import TransformContext

ROOT_CFG = pathlib.Path(__file__).resolve().parents[1] / "config.yaml"


def test_load_project_config(monkeypatch):
    monkeypatch.delenv("TRANSFORM_NETWORK", raising=False)
    st = load_settings(str(ROOT_CFG))
    assert st.network == "starknet-mainnet"
    assert st.codec.size_table is SizeTableMode.ASSET_CLASS_GATED
    assert st.codec.count_radix is CountRadix.DECIMAL
    assert st.contract("oracle").startswith("0x2a85bd61")


def test_network_env_override(monkeypatch):
    monkeypatch.setenv("TRANSFORM_NETWORK", "pragma-devnet")
    st = load_settings(str(ROOT_CFG))
    assert st.network == "pragma-devnet"
    assert st.contract("hyperlane_mailbox").startswith("0x064bb5e2")


def test_missing_contract_role_raises():
    st = Settings(network="starknet-mainnet", deployments={"starknet-mainnet": Deployment()})
    with pytest.raises(RuntimeError):
        st.contract("vrf")
    with pytest.raises(RuntimeError):
        Settings(network="elsewhere").contract("vrf")


def test_codec_options_from_yaml(tmp_path, monkeypatch):
    monkeypatch.delenv("TRANSFORM_NETWORK", raising=False)
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "network: n\n"
        "skip_failed_events: true\n"
        "codec:\n  size_table: main_type_only\n  count_radix: hex\n"
        "deployments:\n  n:\n    hyperlane_mailbox: \"0x1\"\n"
    )
    st = load_settings(str(cfg))
    ctx = TransformContext.from_settings(st)
    assert ctx.size_table is SizeTableMode.MAIN_TYPE_ONLY
    assert ctx.count_radix is CountRadix.HEX
    assert st.skip_failed_events is True


@pytest.mark.parametrize("body", [
    "deployments:\n  n:\n    oracle: \"not-an-address\"\n",
    "codec:\n  size_table: guess\n",
])
def test_invalid_config_is_reported(tmp_path, body):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text(body)
    with pytest.raises(RuntimeError) as ei:
        load_settings(str(cfg))
    assert "Configuration error" in str(ei.value)
