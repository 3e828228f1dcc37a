import pytest
from pytest import MonkeyPatch

from arch_installer.errors import InstallAborted, PromptExhausted
from arch_installer.prompter import ConsolePrompter, ScriptedPrompter

OPTIONS = [("uki", "UKI"), ("systemd-boot", "systemd-boot"), ("grub", "GRUB")]


def test_scripted_answers_are_consumed_in_order() -> None:
    p = ScriptedPrompter({"disk": ["/dev/sda", "/dev/sdb"]})

    assert p.ask("disk", "Disk") == "/dev/sda"
    assert p.ask("disk", "Disk") == "/dev/sdb"
    with pytest.raises(PromptExhausted, match="disk"):
        p.ask("disk", "Disk")


def test_ask_default_on_empty_answer() -> None:
    p = ScriptedPrompter({"hostname": ""})

    assert p.ask("hostname", "Hostname", default="Arch") == "Arch"


def test_confirm_accepts_booleans_and_words() -> None:
    p = ScriptedPrompter({"a": True, "b": "no", "c": ["maybe", "Y"], "d": ""})

    assert p.confirm("a", "?") is True
    assert p.confirm("b", "?") is False
    assert p.confirm("c", "?") is True
    assert p.confirm("d", "?", default=True) is True
    assert "  Please answer 'y' or 'n'" in p.shown


def test_choose_by_number_value_or_default() -> None:
    p = ScriptedPrompter({"bl": ["2", "grub", ""]})

    assert p.choose("bl", "Bootloader:", OPTIONS) == "systemd-boot"
    assert p.choose("bl", "Bootloader:", OPTIONS) == "grub"
    assert p.choose("bl", "Bootloader:", OPTIONS, default="uki") == "uki"


def test_choose_invalid_reprompts() -> None:
    p = ScriptedPrompter({"bl": ["7", "lilo", "3"]})

    assert p.choose("bl", "Bootloader:", OPTIONS) == "grub"
    assert sum("Invalid choice" in line for line in p.shown) == 2


def test_choose_without_default_keeps_asking_on_empty() -> None:
    p = ScriptedPrompter({"bl": [""]})

    with pytest.raises(PromptExhausted):
        p.choose("bl", "Bootloader:", OPTIONS)


def test_console_prompter_reads_stdin(monkeypatch: MonkeyPatch) -> None:
    answers = iter(["", "y"])
    monkeypatch.setattr("builtins.input", lambda _msg: next(answers))
    monkeypatch.setattr("arch_installer.prompter.getpass.getpass", lambda _msg: "Secret123")
    p = ConsolePrompter()

    assert p.ask("hostname", "Hostname", default="Arch") == "Arch"
    assert p.confirm("ok", "Continue?") is True
    assert p.secret("pw", "Password") == "Secret123"


def _eof(_msg):
    raise EOFError


def test_console_prompter_closed_stdin_aborts_choice(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr("builtins.input", _eof)

    with pytest.raises(InstallAborted, match="standard input closed"):
        ConsolePrompter().choose("cpu_vendor", "CPU vendor:", [("intel", "Intel"), ("amd", "AMD")])


def test_console_prompter_closed_stdin_aborts_secret(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr("arch_installer.prompter.getpass.getpass", _eof)

    with pytest.raises(InstallAborted):
        ConsolePrompter().secret("root_password", "Root password")
