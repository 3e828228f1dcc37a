from __future__ import annotations

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PROVISIONING = 2
EXIT_INTERRUPTED = 130


class InstallerError(Exception):
    """Base class for errors that end the run with a specific exit code."""

    exit_code = EXIT_FAILURE


class ConfigError(InstallerError):
    pass


class PreconditionError(InstallerError):
    """Raised before any destructive action (privilege, tools, boot mode, network)."""


class CommandError(InstallerError):
    def __init__(self, argv: list[str], returncode: int, stderr: str = "") -> None:
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed ({returncode}): {' '.join(argv)}\n{stderr}".rstrip())


class MountError(InstallerError):
    exit_code = EXIT_PROVISIONING


class ProvisioningError(InstallerError):
    """Partitioning or formatting a disk failed."""

    exit_code = EXIT_PROVISIONING


class InstallAborted(InstallerError):
    """The operator chose to stop the installation."""


class PromptExhausted(InstallerError):
    """A scripted prompter has no answer left for a prompt."""


class UserDeclined(Exception):
    """An interactive confirmation was rejected; callers re-prompt."""


class StepError(InstallerError):
    def __init__(self, step_id: str, cause: BaseException) -> None:
        self.step_id = step_id
        self.cause = cause
        self.exit_code = getattr(cause, "exit_code", EXIT_FAILURE)
        super().__init__(f"Step {step_id} failed: {cause}")
