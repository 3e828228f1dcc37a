from __future__ import annotations

import logging
import re
from typing import Sequence

from ..context import InstallContext
from ..lib.chroot import chroot_cmd
from ..lib.files import substitute, target_path, write_file
from ..lib.pacman import pacman_install

logger = logging.getLogger(__name__)


def enable_locales(text: str, locales: Sequence[str]) -> str:
    """Uncomment the given entries of a locale.gen file."""

    for loc in locales:
        text, _ = substitute(text, rf"^#[ \t]*{re.escape(loc)}[ \t]*$", loc)
    return text


def render_vconsole(font: str, font_map: str) -> str:
    return f"FONT={font}\nFONT_MAP={font_map}\n"


class ConfigureLocalizationStep:
    step_id = "55_configure_localization"
    required = True

    def run(self, ctx: InstallContext) -> None:
        cfg = ctx.config
        root = ctx.target_root

        chroot_cmd(root, ["ln", "-sf", f"/usr/share/zoneinfo/{cfg.timezone}", "/etc/localtime"], dry_run=ctx.dry_run)
        chroot_cmd(root, ["hwclock", "--systohc"], dry_run=ctx.dry_run)

        locale_gen = target_path(root, "/etc/locale.gen")
        existing = "" if ctx.dry_run or not locale_gen.exists() else locale_gen.read_text(encoding="utf-8")
        updated = enable_locales(existing, cfg.locales)
        missing = [loc for loc in cfg.locales if not re.search(rf"^{re.escape(loc)}[ \t]*$", updated, re.MULTILINE)]
        if missing:
            # Not listed at all (or no locale.gen yet): add them explicitly.
            updated += "".join(f"{loc}\n" for loc in missing)
        write_file(root, "/etc/locale.gen", updated, dry_run=ctx.dry_run)
        chroot_cmd(root, ["locale-gen"], dry_run=ctx.dry_run)

        write_file(root, "/etc/locale.conf", f"LANG={cfg.lang}\n", dry_run=ctx.dry_run)

        pacman_install(root, ["terminus-font"], dry_run=ctx.dry_run)
        write_file(root, "/etc/vconsole.conf", render_vconsole(cfg.console_font, cfg.console_font_map), dry_run=ctx.dry_run)

        logger.info("Localization configured (tz=%s lang=%s)", cfg.timezone, cfg.lang)
