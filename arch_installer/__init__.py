"""Arch Linux installer (step-driven, interactive or scripted).

Core design goals:
- Fixed, ordered steps with abort-on-error
- Every mount released in reverse order, success or failure
- Prompts behind an injectable Prompter so runs can be scripted
- Centralized logging
"""

__all__ = []
