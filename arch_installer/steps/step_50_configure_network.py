from __future__ import annotations

import logging
from typing import Sequence

from ..context import InstallContext
from ..lib.chroot import chroot_cmd
from ..lib.files import write_file
from ..lib.net import interface_exists, is_wireless, list_interfaces
from ..lib.pacman import pacman_install

logger = logging.getLogger(__name__)

NETWORKMANAGER = "networkmanager"
NETWORKD = "systemd-networkd"

NETWORK_OPTIONS = [
    (NETWORKMANAGER, "NetworkManager (choose this for intranet/captive-portal authentication)"),
    (NETWORKD, "systemd-networkd (lighter, better performance)"),
]


def render_network_unit(interface: str, dns: Sequence[str]) -> str:
    lines = ["[Match]", f"Name={interface}", "", "[Network]", "DHCP=yes"]
    lines += [f"DNS={d}" for d in dns]
    return "\n".join(lines) + "\n"


def network_unit_path(interface: str) -> str:
    kind = "wireless" if is_wireless(interface) else "wired"
    return f"/etc/systemd/network/10-{kind}.network"


def _link_stub_resolv(ctx: InstallContext) -> None:
    chroot_cmd(
        ctx.target_root,
        ["ln", "-sf", "/run/systemd/resolve/stub-resolv.conf", "/etc/resolv.conf"],
        dry_run=ctx.dry_run,
    )


class ConfigureNetworkStep:
    step_id = "50_configure_network"
    required = True

    def run(self, ctx: InstallContext) -> None:
        choice = ctx.prompter.choose("network_manager", "Network management tool:", NETWORK_OPTIONS)
        ctx.state.network_manager = choice

        if choice == NETWORKMANAGER:
            self._networkmanager(ctx)
        else:
            self._networkd(ctx)

        ctx.decide("network_manager", choice)
        logger.info("Network configured with %s", choice)

    def _networkmanager(self, ctx: InstallContext) -> None:
        pacman_install(ctx.target_root, ["networkmanager"], dry_run=ctx.dry_run)
        chroot_cmd(ctx.target_root, ["systemctl", "enable", "NetworkManager"], dry_run=ctx.dry_run)
        _link_stub_resolv(ctx)

    def _networkd(self, ctx: InstallContext) -> None:
        chroot_cmd(
            ctx.target_root,
            ["systemctl", "enable", "systemd-networkd", "systemd-resolved"],
            dry_run=ctx.dry_run,
        )
        _link_stub_resolv(ctx)

        if ctx.prompter.confirm("wireless_support", "Install wireless support (iwd)?", default=False):
            pacman_install(ctx.target_root, ["iwd"], dry_run=ctx.dry_run)
            chroot_cmd(ctx.target_root, ["systemctl", "enable", "iwd"], dry_run=ctx.dry_run)
            ctx.decide("iwd", True)

        ctx.prompter.show("Available interfaces:")
        for name in list_interfaces(dry_run=ctx.dry_run):
            ctx.prompter.show(f"  {name}")

        while True:
            interface = ctx.prompter.ask("interface", "Interface to configure").strip()
            if interface_exists(interface, dry_run=ctx.dry_run):
                break
            ctx.prompter.show(f"Error: no such interface {interface!r}")

        write_file(
            ctx.target_root,
            network_unit_path(interface),
            render_network_unit(interface, ctx.config.dns_servers),
            dry_run=ctx.dry_run,
        )
        ctx.decide("interface", interface)
