from pathlib import Path

import pytest

from arch_installer.lib.bootloader import (
    BOOT_ARTIFACTS,
    Bootloader,
    BootTarget,
    build_kernel_params,
    install_bootloader,
    render_boot_entry,
    render_grub_defaults,
    render_uki_cmdline,
    write_grub_defaults,
    write_systemd_boot_config,
    write_uki_config,
)
from arch_installer.lib.storage import ROOT_MOUNT_OPTIONS

PARTUUID = "0b1c2d3e-aaaa-bbbb-cccc-1234567890ab"

STOCK_GRUB = """# GRUB boot loader configuration

GRUB_DEFAULT=0
GRUB_TIMEOUT=5
GRUB_DISTRIBUTOR="Arch"
GRUB_CMDLINE_LINUX_DEFAULT="loglevel=3 quiet"
GRUB_CMDLINE_LINUX=""
"""


def _files(root: Path) -> set:
    return {str(p.relative_to(root)) for p in root.rglob("*") if p.is_file()}


def test_kernel_params_shape() -> None:
    params = build_kernel_params(PARTUUID)

    assert params.cmdline == (
        f"root=PARTUUID={PARTUUID} rw rootflags={ROOT_MOUNT_OPTIONS} loglevel=3 quiet"
    )


def test_kernel_params_extra() -> None:
    params = build_kernel_params(PARTUUID, ["ibt=off", "", "nvidia_drm.modeset=1"])

    assert params.cmdline.endswith("quiet ibt=off nvidia_drm.modeset=1")


def test_every_variant_embeds_the_same_root_options() -> None:
    params = build_kernel_params(PARTUUID, ["ibt=off"])
    root_part = " ".join(params.root)

    uki = render_uki_cmdline(params)
    entry = render_boot_entry(params)
    grub = render_grub_defaults(STOCK_GRUB, params)

    for text in (uki, entry, grub):
        assert f"root=PARTUUID={PARTUUID}" in text
        assert f"rootflags={ROOT_MOUNT_OPTIONS}" in text
        assert "ibt=off" in text
    assert f"options {params.cmdline}\n" in entry
    assert uki == params.cmdline + "\n"
    assert f'GRUB_CMDLINE_LINUX="{root_part}"' in grub


def test_grub_defaults_rewrites_keys() -> None:
    params = build_kernel_params(PARTUUID)

    text = render_grub_defaults(STOCK_GRUB, params)

    assert "GRUB_TIMEOUT=2\n" in text
    assert "GRUB_TIMEOUT=5" not in text
    assert 'GRUB_CMDLINE_LINUX_DEFAULT="loglevel=3 quiet"' in text
    assert 'GRUB_DISTRIBUTOR="Arch"' in text
    assert text.count("GRUB_CMDLINE_LINUX=") == 1


def test_grub_defaults_appends_missing_keys() -> None:
    text = render_grub_defaults("GRUB_DEFAULT=0", build_kernel_params(PARTUUID))

    assert text.startswith("GRUB_DEFAULT=0\n")
    assert "GRUB_TIMEOUT=2" in text
    assert f'GRUB_CMDLINE_LINUX="root=PARTUUID={PARTUUID}' in text


def test_artifact_sets_are_disjoint() -> None:
    variants = list(Bootloader)
    for i, a in enumerate(variants):
        for b in variants[i + 1 :]:
            assert not set(BOOT_ARTIFACTS[a]) & set(BOOT_ARTIFACTS[b])


def test_boot_entry_then_uki_do_not_interfere(tmp_path: Path) -> None:
    params = build_kernel_params(PARTUUID)

    write_systemd_boot_config(str(tmp_path), params)
    after_entry = {f: (tmp_path / f).read_text() for f in _files(tmp_path)}
    write_uki_config(str(tmp_path), params)

    uki_files = _files(tmp_path) - set(after_entry)
    assert uki_files == {"etc/kernel/cmdline", "etc/mkinitcpio.d/linux.preset"}
    for f, content in after_entry.items():
        assert (tmp_path / f).read_text() == content


def test_write_grub_defaults_edits_existing(tmp_path: Path) -> None:
    grub = tmp_path / "etc/default/grub"
    grub.parent.mkdir(parents=True)
    grub.write_text(STOCK_GRUB)

    write_grub_defaults(str(tmp_path), build_kernel_params(PARTUUID))

    assert 'GRUB_DISTRIBUTOR="Arch"' in grub.read_text()
    assert f"root=PARTUUID={PARTUUID}" in grub.read_text()


@pytest.mark.parametrize(
    "variant, expected_cmds",
    [
        (Bootloader.UKI, [["mkinitcpio", "-P"], ["efibootmgr", "--create"]]),
        (Bootloader.SYSTEMD_BOOT, [["bootctl", "install"], ["mkinitcpio", "-P"]]),
        (Bootloader.GRUB, [["pacman", "-S"], ["grub-install"], ["mkinitcpio", "-P"], ["grub-mkconfig"]]),
    ],
)
def test_install_bootloader_commands(fake_run, tmp_path: Path, variant, expected_cmds) -> None:
    target = BootTarget(target_root=str(tmp_path), disk="/dev/sda", efi_part_num=1, params=build_kernel_params(PARTUUID))

    install_bootloader(variant, target)

    chrooted = [c[2:] for c in fake_run.calls if c[:2] == ["arch-chroot", str(tmp_path)]]
    assert len(chrooted) == len(fake_run.calls)
    assert [c[: len(e)] for c, e in zip(chrooted, expected_cmds)] == expected_cmds
    for rel in BOOT_ARTIFACTS[variant]:
        if not rel.startswith("boot/EFI") and not rel.startswith("boot/grub"):
            # images and grub.cfg are produced by the chrooted tools
            assert (tmp_path / rel).is_file(), rel


def test_uki_registers_firmware_entry(fake_run, tmp_path: Path) -> None:
    target = BootTarget(target_root=str(tmp_path), disk="/dev/nvme0n1", efi_part_num=1, params=build_kernel_params(PARTUUID))

    install_bootloader(Bootloader.UKI, target)

    efi = [c for c in fake_run.calls if "efibootmgr" in c][0]
    assert efi[efi.index("--disk") + 1] == "/dev/nvme0n1"
    assert efi[efi.index("--part") + 1] == "1"
    assert efi[efi.index("--label") + 1] == "Arch Linux"
    assert (tmp_path / "boot/EFI/Linux").is_dir()
