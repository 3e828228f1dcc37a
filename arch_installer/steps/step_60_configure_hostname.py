from __future__ import annotations

import logging
import re

from ..context import InstallContext
from ..lib.files import write_file

logger = logging.getLogger(__name__)

_HOSTNAME_RE = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9-]{0,62})$")


def render_hosts(hostname: str) -> str:
    return (
        "127.0.0.1   localhost\n"
        "::1         localhost\n"
        f"127.0.1.1   {hostname}.localdomain {hostname}\n"
    )


class ConfigureHostnameStep:
    step_id = "60_configure_hostname"
    required = True

    def run(self, ctx: InstallContext) -> None:
        while True:
            hostname = ctx.prompter.ask("hostname", "Hostname", default=ctx.config.default_hostname).strip()
            if _HOSTNAME_RE.match(hostname):
                break
            ctx.prompter.show(f"Error: {hostname!r} is not a valid hostname")

        write_file(ctx.target_root, "/etc/hostname", hostname + "\n", dry_run=ctx.dry_run)
        write_file(ctx.target_root, "/etc/hosts", render_hosts(hostname), dry_run=ctx.dry_run)

        ctx.state.hostname = hostname
        ctx.decide("hostname", hostname)
        logger.info("Hostname set to %s", hostname)
