from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List

from ..context import InstallContext
from ..lib.chroot import chroot_cmd, chroot_succeeds
from ..lib.files import edit_file, write_file
from ..lib.fstab import bind_entry, render_fstab
from ..lib.pacman import pacman_install

logger = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"^[a-z_][a-z0-9_-]*$")
MIN_PASSWORD_LENGTH = 8

OH_MY_ZSH_URL = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"


def password_problems(password: str) -> List[str]:
    problems = []
    if len(password) < MIN_PASSWORD_LENGTH:
        problems.append(f"at least {MIN_PASSWORD_LENGTH} characters")
    if not re.search(r"[a-z]", password):
        problems.append("a lowercase letter")
    if not re.search(r"[A-Z]", password):
        problems.append("an uppercase letter")
    if not re.search(r"[0-9]", password):
        problems.append("a digit")
    return problems


def bind_dirs_fstab(username: str, dirs: List[str]) -> str:
    return render_fstab(bind_entry(f"/mnt/{username}/{d}", f"/home/{username}/{d}") for d in dirs)


class SetupUsersStep:
    step_id = "80_setup_users"
    required = True

    def run(self, ctx: InstallContext) -> None:
        root = ctx.target_root
        pacman_install(root, ["sudo", "zsh"], dry_run=ctx.dry_run)

        username = self._ask_username(ctx)
        chroot_cmd(
            root,
            ["useradd", "-m", "-G", ",".join(ctx.config.user_groups), "-s", ctx.config.user_shell, username],
            dry_run=ctx.dry_run,
        )
        ctx.state.username = username

        edit_file(root, "/etc/sudoers", r"^#[ \t]*%wheel ALL=\(ALL:ALL\) ALL$", "%wheel ALL=(ALL:ALL) ALL", dry_run=ctx.dry_run)

        self._set_password(ctx, "root", "root_password")
        self._set_password(ctx, username, "user_password")

        if ctx.config.install_oh_my_zsh:
            self._install_oh_my_zsh(ctx, username)

        if ctx.state.data_partition:
            self._bind_user_dirs(ctx, username)

        ctx.decide("username", username)
        logger.info("User %s configured", username)

    def _ask_username(self, ctx: InstallContext) -> str:
        while True:
            name = ctx.prompter.ask("username", "New username").strip()
            if not USERNAME_RE.match(name):
                ctx.prompter.show(
                    "Error: use lowercase letters, digits, '_' and '-', starting with a letter or '_'"
                )
                continue
            if not ctx.dry_run and chroot_succeeds(ctx.target_root, ["id", name]):
                ctx.prompter.show(f"Error: user {name} already exists")
                continue
            return name

    def _set_password(self, ctx: InstallContext, user: str, key: str) -> None:
        while True:
            password = ctx.prompter.secret(key, f"Password for {user} (8+ chars, upper/lower case and digits)")
            problems = password_problems(password)
            if problems:
                ctx.prompter.show("Password needs " + ", ".join(problems))
                continue
            if ctx.prompter.secret(f"{key}_confirm", f"Repeat password for {user}") != password:
                ctx.prompter.show("Passwords do not match")
                continue
            break

        chroot_cmd(ctx.target_root, ["chpasswd"], input_text=f"{user}:{password}\n", redact_input=True, dry_run=ctx.dry_run)
        logger.info("Password set for %s", user)

    def _install_oh_my_zsh(self, ctx: InstallContext, username: str) -> None:
        r = chroot_cmd(
            ctx.target_root,
            ["sudo", "-u", username, "sh", "-c", f'sh -c "$(curl -fsSL {OH_MY_ZSH_URL})" "" --unattended'],
            check=False,
            dry_run=ctx.dry_run,
        )
        if not r.ok:
            logger.warning("Oh My Zsh install failed (rc=%s); continuing without it", r.returncode)
        ctx.decide("oh_my_zsh", r.ok)

    def _bind_user_dirs(self, ctx: InstallContext, username: str) -> None:
        dirs = list(ctx.config.bind_dirs)
        extra = ctx.prompter.ask(
            "extra_bind_dirs",
            f"Extra home directories to keep on the data disk besides {' '.join(dirs)} (space separated, Enter to skip)",
        )
        for d in extra.split():
            if d not in dirs:
                dirs.append(d)

        root = Path(ctx.target_root)
        chroot_paths = []
        for d in dirs:
            for base in (f"mnt/{username}", f"home/{username}"):
                if not ctx.dry_run:
                    (root / base / d).mkdir(parents=True, exist_ok=True)
                chroot_paths.append(f"/{base}/{d}")

        # Ownership has to be resolved inside the target; the user doesn't exist on the live system.
        chroot_cmd(ctx.target_root, ["chown", "-R", f"{username}:{username}", f"/mnt/{username}", *chroot_paths], dry_run=ctx.dry_run)
        chroot_cmd(ctx.target_root, ["chmod", "700", f"/mnt/{username}", *chroot_paths], dry_run=ctx.dry_run)

        write_file(ctx.target_root, "/etc/fstab", bind_dirs_fstab(username, dirs), append=True, dry_run=ctx.dry_run)
        ctx.decide("bind_dirs", dirs)
        logger.info("Bound %d home directories of %s to the data disk", len(dirs), username)
