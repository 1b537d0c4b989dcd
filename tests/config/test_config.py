import dataclasses
import json

import pytest

from archway.config import InstallConfig, load_config
from archway.errors import ConfigError


def test_defaults():
    cfg = load_config(None)
    assert cfg.device == "/dev/sda"
    assert cfg.boot_partition == "/dev/sda1"
    assert cfg.lvm_partition == "/dev/sda2"
    assert cfg.hook_anchor == "block"
    assert cfg.hook_token == "lvm2"
    assert str(cfg.target_home) == "/mnt/newsys/home/kwest"
    assert not hasattr(cfg, "installed_home")


def test_nvme_partition_names():
    cfg = InstallConfig(device="/dev/nvme0n1")
    assert cfg.boot_partition == "/dev/nvme0n1p1"
    assert cfg.lvm_partition == "/dev/nvme0n1p2"


def test_frozen():
    cfg = InstallConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.device = "/dev/sdb"


def test_load_yaml(tmp_path):
    p = tmp_path / "install.yaml"
    p.write_text("device: /dev/vda\nusername: alice\nkernel_presets:\n  - linux\nswap_size_mib: 512\n")
    cfg = load_config(str(p))
    assert cfg.device == "/dev/vda"
    assert cfg.username == "alice"
    assert cfg.kernel_presets == ("linux",)
    assert cfg.swap_size_mib == 512
    assert cfg.timezone == "America/Los_Angeles"


def test_load_json(tmp_path):
    p = tmp_path / "install.json"
    p.write_text(json.dumps({"hostname": "box"}))
    assert load_config(str(p)).hostname == "box"


def test_empty_yaml_is_defaults(tmp_path):
    p = tmp_path / "install.yml"
    p.write_text("")
    assert load_config(str(p)) == InstallConfig()


def test_roundtrip_through_dict():
    cfg = InstallConfig(username="alice", post_services=("lightdm",))
    assert InstallConfig.from_dict(json.loads(json.dumps(cfg.to_dict()))) == cfg


@pytest.mark.parametrize(
    "raw",
    [
        {"unknown_key": 1},
        {"device": ""},
        {"device": 3},
        {"swap_size_mib": "2048"},
        {"swap_size_mib": 0},
        {"swap_size_mib": True},
        {"initial_packages": "base"},
        {"initial_packages": ["base", 1]},
    ],
)
def test_invalid_values(raw):
    with pytest.raises(ConfigError):
        InstallConfig.from_dict(raw)


def test_not_a_mapping(tmp_path):
    p = tmp_path / "install.yaml"
    p.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_config(str(p))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.yaml"))


def test_invalid_yaml(tmp_path):
    p = tmp_path / "install.yaml"
    p.write_text("device: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config(str(p))
