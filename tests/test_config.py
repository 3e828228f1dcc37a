import json
from pathlib import Path

import pytest

from arch_installer.config import DEFAULT_BASE_PACKAGES, InstallerConfig, load_config
from arch_installer.errors import ConfigError


def test_defaults_without_file() -> None:
    cfg = load_config(None)

    assert cfg.base_packages == DEFAULT_BASE_PACKAGES
    assert cfg.timezone == "Asia/Shanghai"
    assert cfg.default_hostname == "Arch"
    assert cfg.efi_size == "500M"
    assert cfg.skip_steps == []
    assert cfg.accept_failed_verification is None
    assert cfg.answers == {}


def test_load_yaml(tmp_path: Path) -> None:
    p = tmp_path / "install.yaml"
    p.write_text(
        "locale:\n"
        "  timezone: Europe/Berlin\n"
        "  lang: de_DE.UTF-8\n"
        "skip_steps: [75_configure_archlinuxcn]\n"
        "accept_failed_verification: false\n"
        "answers:\n"
        "  disk: /dev/vda\n"
        "  confirm_disk: yes\n"
    )

    cfg = load_config(str(p))

    assert cfg.timezone == "Europe/Berlin"
    assert cfg.lang == "de_DE.UTF-8"
    assert cfg.console_font == "ter-u16n"
    assert cfg.skip_steps == ["75_configure_archlinuxcn"]
    assert cfg.accept_failed_verification is False
    assert cfg.answers == {"disk": "/dev/vda", "confirm_disk": True}


def test_load_json(tmp_path: Path) -> None:
    p = tmp_path / "install.json"
    p.write_text(json.dumps({"mirrors": ["https://example.org/$repo/os/$arch"], "users": {"shell": "/bin/bash"}}))

    cfg = load_config(str(p))

    assert cfg.mirrors == ["https://example.org/$repo/os/$arch"]
    assert cfg.user_shell == "/bin/bash"
    assert cfg.install_oh_my_zsh is True


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "nope.yaml"))


def test_non_mapping_rejected(tmp_path: Path) -> None:
    p = tmp_path / "list.yaml"
    p.write_text("- a\n- b\n")

    with pytest.raises(ConfigError, match="object/dict"):
        load_config(str(p))


def test_invalid_yaml(tmp_path: Path) -> None:
    p = tmp_path / "bad.yml"
    p.write_text("locale: [unclosed\n")

    with pytest.raises(ConfigError, match="Unable to parse"):
        load_config(str(p))


def test_section_must_be_mapping() -> None:
    with pytest.raises(ConfigError, match="config.locale"):
        _ = InstallerConfig(raw={"locale": "en_US"}).timezone


@pytest.mark.parametrize("value", ["false", 0, "no"])
def test_accept_failed_verification_must_be_bool(tmp_path: Path, value) -> None:
    p = tmp_path / "install.json"
    p.write_text(json.dumps({"accept_failed_verification": value}))

    with pytest.raises(ConfigError, match="accept_failed_verification"):
        load_config(str(p))


def test_answers_must_be_mapping_at_load(tmp_path: Path) -> None:
    p = tmp_path / "install.yaml"
    p.write_text("answers:\n  - disk\n")

    with pytest.raises(ConfigError, match="config.answers"):
        load_config(str(p))
