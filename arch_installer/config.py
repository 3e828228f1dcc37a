from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_MIRRORS = [
    "https://mirrors.ustc.edu.cn/archlinux/$repo/os/$arch",
    "https://mirrors.xjtu.edu.cn/archlinux/$repo/os/$arch",
    "https://mirrors.tuna.tsinghua.edu.cn/archlinux/$repo/os/$arch",
    "https://mirrors.jlu.edu.cn/archlinux/$repo/os/$arch",
]

DEFAULT_BASE_PACKAGES = ["base", "base-devel", "linux", "linux-firmware", "neovim", "f2fs-tools"]

DEFAULT_USER_GROUPS = ["wheel", "audio", "video", "storage", "optical", "network"]

DEFAULT_BIND_DIRS = [".cache", "Downloads", "Documents", "Pictures"]


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to YAML for unknown extensions; JSON is a subset of it.
    return "yaml"


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        value = self.raw.get(name) or {}
        if not isinstance(value, dict):
            raise ConfigError(f"config.{name} must be a mapping")
        return value

    @property
    def mirrors(self) -> List[str]:
        return list(self.raw.get("mirrors") or DEFAULT_MIRRORS)

    @property
    def base_packages(self) -> List[str]:
        return list(self.raw.get("base_packages") or DEFAULT_BASE_PACKAGES)

    @property
    def efi_size(self) -> str:
        return str(self.raw.get("efi_size") or "500M")

    @property
    def timezone(self) -> str:
        return str(self._section("locale").get("timezone") or "Asia/Shanghai")

    @property
    def locales(self) -> List[str]:
        return list(self._section("locale").get("locales") or ["en_US.UTF-8 UTF-8", "zh_CN.UTF-8 UTF-8"])

    @property
    def lang(self) -> str:
        return str(self._section("locale").get("lang") or "en_US.UTF-8")

    @property
    def console_font(self) -> str:
        return str(self._section("locale").get("console_font") or "ter-u16n")

    @property
    def console_font_map(self) -> str:
        return str(self._section("locale").get("console_font_map") or "8859-2")

    @property
    def default_hostname(self) -> str:
        return str(self.raw.get("default_hostname") or "Arch")

    @property
    def dns_servers(self) -> List[str]:
        return list(self._section("network").get("dns") or ["223.5.5.5", "119.29.29.29"])

    @property
    def user_groups(self) -> List[str]:
        return list(self._section("users").get("groups") or DEFAULT_USER_GROUPS)

    @property
    def user_shell(self) -> str:
        return str(self._section("users").get("shell") or "/bin/zsh")

    @property
    def install_oh_my_zsh(self) -> bool:
        return bool(self._section("users").get("oh_my_zsh", True))

    @property
    def bind_dirs(self) -> List[str]:
        return list(self._section("users").get("bind_dirs") or DEFAULT_BIND_DIRS)

    @property
    def archlinuxcn_server(self) -> str:
        return str(
            self._section("archlinuxcn").get("server") or "https://mirrors.bfsu.edu.cn/archlinuxcn/$arch"
        )

    @property
    def skip_steps(self) -> List[str]:
        return [str(s) for s in (self.raw.get("skip_steps") or [])]

    @property
    def accept_failed_verification(self) -> Optional[bool]:
        value = self.raw.get("accept_failed_verification")
        if value is None or isinstance(value, bool):
            return value
        raise ConfigError("config.accept_failed_verification must be true or false")

    @property
    def answers(self) -> Dict[str, Any]:
        return self._section("answers")


def load_config(path: Optional[str]) -> InstallerConfig:
    """Load installer settings from JSON or YAML. No path means all defaults."""

    if not path:
        return InstallerConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")

    text = p.read_text(encoding="utf-8")
    try:
        if _detect_format(p) == "json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Unable to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be an object/dict, got {type(data).__name__}")

    cfg = InstallerConfig(raw=data)
    # Sections read late in the run are checked up front.
    _ = cfg.answers, cfg.accept_failed_verification
    logger.info("Loaded config from %s", path)
    return cfg
