from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigError

INITIAL_PACKAGES: Tuple[str, ...] = (
    "linux",
    "linux-headers",
    "linux-lts",
    "linux-lts-headers",
    "vim",
    "nano",
    "base-devel",
    "sudo",
    "openssh",
    "networkmanager",
    "wpa_supplicant",
    "wireless_tools",
    "netctl",
    "lvm2",
    "grub",
    "efibootmgr",
    "dosfstools",
    "mtools",
    "os-prober",
    # Runtime for the deployed continuation.
    "python",
    "python-yaml",
    "python-passlib",
)

POST_PACKAGES: Tuple[str, ...] = (
    "amd-ucode",
    "xorg-server",
    "virtualbox-guest-utils",
    "xf86-video-vmware",
    "xfce4",
    "xfce4-goodies",
    "lightdm",
    "lightdm-gtk-greeter",
)


def _part_suffix(disk: str, n: int) -> str:
    # nvme/mmcblk devices use p suffix
    if disk.endswith(tuple("0123456789")):
        return f"{disk}p{n}"
    return f"{disk}{n}"


@dataclass(frozen=True)
class InstallConfig:
    device: str = "/dev/sda"
    boot_size_mib: int = 500
    volgroup: str = "vg0"
    root_lv_size: str = "30GB"
    swap_size_mib: int = 2048
    locale_gen: str = "en_US.UTF-8 UTF-8"
    mount_prefix: str = "/mnt/newsys"
    username: str = "kwest"
    timezone: str = "America/Los_Angeles"
    hostname: str = "kwest-arch"
    hook_anchor: str = "block"
    hook_token: str = "lvm2"
    kernel_presets: Tuple[str, ...] = ("linux", "linux-lts")
    initial_packages: Tuple[str, ...] = INITIAL_PACKAGES
    services: Tuple[str, ...] = ("NetworkManager", "sshd")
    post_packages: Tuple[str, ...] = POST_PACKAGES
    post_services: Tuple[str, ...] = ("vboxservice", "lightdm")
    crypt_method: str = "SHA512"
    efi_mount: str = "/boot/EFI"
    grub_bootloader_id: str = "grub_uefi"

    @property
    def boot_partition(self) -> str:
        return _part_suffix(self.device, 1)

    @property
    def lvm_partition(self) -> str:
        return _part_suffix(self.device, 2)

    @property
    def target_home(self) -> Path:
        """The installed user's home, as seen from the live environment."""
        return Path(self.mount_prefix) / "home" / self.username

    def to_dict(self) -> Dict[str, Any]:
        out = dataclasses.asdict(self)
        for k, v in out.items():
            if isinstance(v, tuple):
                out[k] = list(v)
        return out

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "InstallConfig":
        if not isinstance(raw, dict):
            raise ConfigError(f"Install config must be a mapping/object, got {type(raw).__name__}")

        fields = {f.name: f for f in dataclasses.fields(cls)}
        unknown = sorted(set(raw) - set(fields))
        if unknown:
            raise ConfigError(f"Unknown install config keys: {', '.join(unknown)}")

        kwargs: Dict[str, Any] = {}
        for name, value in raw.items():
            default = fields[name].default
            if isinstance(default, tuple):
                if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
                    raise ConfigError(f"config.{name} must be a list of strings")
                kwargs[name] = tuple(value)
            elif isinstance(default, int):
                if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                    raise ConfigError(f"config.{name} must be a positive integer, got {value!r}")
                kwargs[name] = value
            else:
                if not isinstance(value, str) or not value.strip():
                    raise ConfigError(f"config.{name} must be a non-empty string, got {value!r}")
                kwargs[name] = value.strip()

        return cls(**kwargs)


def load_config(path: Optional[str]) -> InstallConfig:
    """Load install config from YAML or JSON; no path means all defaults."""

    if path is None:
        return InstallConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Install config not found: {path}")

    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        import yaml

        try:
            raw = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    else:
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    return InstallConfig.from_dict(raw)
