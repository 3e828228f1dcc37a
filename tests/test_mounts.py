from pathlib import Path

import pytest

from arch_installer.errors import MountError
from arch_installer.lib.mounts import Mount, MountManager


def test_mount_records_and_creates_target(fake_run, tmp_path: Path) -> None:
    target = tmp_path / "mnt" / "boot"
    mounts = MountManager()

    m = mounts.mount("/dev/sda1", str(target))

    assert target.is_dir()
    assert m == Mount(source="/dev/sda1", target=str(target))
    assert mounts.active == [m]
    assert fake_run.calls == [["mount", "/dev/sda1", str(target)]]


def test_mount_options_and_bind(fake_run, tmp_path: Path) -> None:
    mounts = MountManager()
    mounts.mount("/dev/sda2", str(tmp_path / "a"), "compress_algorithm=zstd:6")
    mounts.mount(str(tmp_path / "src"), str(tmp_path / "b"), bind=True)

    assert fake_run.calls == [
        ["mount", "-o", "compress_algorithm=zstd:6", "/dev/sda2", str(tmp_path / "a")],
        ["mount", "--bind", str(tmp_path / "src"), str(tmp_path / "b")],
    ]


def test_failed_mount_is_not_recorded(fake_run, tmp_path: Path) -> None:
    fake_run.fail_on("mount", stderr="mount: wrong fs type")
    mounts = MountManager()

    with pytest.raises(MountError, match="wrong fs type"):
        mounts.mount("/dev/sda2", str(tmp_path / "root"))

    assert mounts.active == []


def test_uncreatable_target_raises(fake_run, tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x")
    mounts = MountManager()

    with pytest.raises(MountError, match="mount point"):
        mounts.mount("/dev/sda2", str(blocker / "sub"))

    assert fake_run.calls == []


def test_unmount_all_in_reverse_order(fake_run, tmp_path: Path) -> None:
    mounts = MountManager()
    targets = [str(tmp_path / n) for n in ("root", "root/boot", "root/mnt", "root/var")]
    for t in targets:
        mounts.mount("src", t)

    mounts.unmount_all()

    assert fake_run.commands("umount") == [["umount", t] for t in reversed(targets)]
    assert mounts.active == []


def test_unmount_all_twice_is_noop(fake_run, tmp_path: Path) -> None:
    mounts = MountManager()
    mounts.mount("src", str(tmp_path / "root"))

    mounts.unmount_all()
    mounts.unmount_all()

    assert len(fake_run.commands("umount")) == 1


def test_unmount_failures_are_ignored(fake_run, tmp_path: Path) -> None:
    mounts = MountManager()
    mounts.mount("src", str(tmp_path / "root"))
    mounts.mount("src", str(tmp_path / "root/boot"))
    fake_run.fail_on("umount", str(tmp_path / "root/boot"), returncode=32, stderr="umount: target is busy.")

    mounts.unmount_all()

    assert fake_run.commands("umount") == [
        ["umount", str(tmp_path / "root/boot")],
        ["umount", str(tmp_path / "root")],
    ]


def test_already_unmounted_counts_as_success(fake_run, tmp_path: Path, caplog) -> None:
    mounts = MountManager()
    mounts.mount("src", str(tmp_path / "root"))
    fake_run.fail_on("umount", returncode=32, stderr=f"umount: {tmp_path / 'root'}: not mounted.")

    mounts.unmount_all()

    assert not [r for r in caplog.records if r.levelname == "WARNING"]


def test_context_manager_unwinds_on_error(fake_run, tmp_path: Path) -> None:
    with pytest.raises(RuntimeError):
        with MountManager() as mounts:
            mounts.mount("a", str(tmp_path / "one"))
            mounts.mount("b", str(tmp_path / "two"))
            raise RuntimeError("step failed")

    assert fake_run.commands("umount") == [
        ["umount", str(tmp_path / "two")],
        ["umount", str(tmp_path / "one")],
    ]
