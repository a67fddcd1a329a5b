"""
sapphire.config - REPL configuration loader

This module handles finding and loading .sapphirerc files. The file is
Sapphire source read with the Sapphire reader; each top-level form is a
(key value) pair:

    ; .sapphirerc
    (prompt-name "sapphire")
    (history-file ".sapphire_history")   ; nil disables history
    (max-depth 256)                      ; nil means no limit
    (pretty #t)
"""

import os
from dataclasses import dataclass
from typing import Any, Optional

from sapphire.reader import ParseError, Symbol, parse

CONFIG_FILENAME = ".sapphirerc"
DEFAULT_PROMPT_NAME = "user"
DEFAULT_HISTORY_FILE = ".sapphire_history"


def find_config_file(start_path: Optional[str] = None) -> Optional[str]:
    """
    Find a .sapphirerc by walking up the directory tree.

    Args:
        start_path: Directory to start from. If None, uses the current
                    working directory.

    Returns:
        Absolute path to the config file, or None if there is none.
    """
    current = os.path.abspath(start_path or os.getcwd())

    while True:
        candidate = os.path.join(current, CONFIG_FILENAME)
        if os.path.isfile(candidate):
            return candidate

        parent = os.path.dirname(current)
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _optional_str(key: str, value: Any) -> Optional[str]:
    if value == ():
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string or nil, got {type(value).__name__}")
    return value


def _str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _optional_depth(key: str, value: Any) -> Optional[int]:
    if value == ():
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{key} must be a positive integer or nil, got {value!r}")
    return value


def _bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be #t or #f, got {value!r}")
    return value


# config key -> (dataclass field, validator)
_FIELDS = {
    "prompt-name": ("prompt_name", _str),
    "history-file": ("history_file", _optional_str),
    "max-depth": ("max_depth", _optional_depth),
    "pretty": ("pretty", _bool),
}


@dataclass
class ReplConfig:
    """
    Settings for the REPL and the command line front end.

    Fields:
        prompt_name: Text before the prompt sigil ("user> ", "user* ")
        history_file: readline history file, or None to disable history
        max_depth: Nesting limit passed to the reader, or None
        pretty: Break long printed forms over several lines
        config_path: The file these settings came from, if any
    """

    prompt_name: str = DEFAULT_PROMPT_NAME
    history_file: Optional[str] = DEFAULT_HISTORY_FILE
    max_depth: Optional[int] = None
    pretty: bool = True
    config_path: Optional[str] = None

    @property
    def prompt(self) -> str:
        """Prompt shown when a new form starts."""
        return f"{self.prompt_name}> "

    @property
    def continuation_prompt(self) -> str:
        """Prompt shown while a form is still incomplete."""
        return f"{self.prompt_name}* "

    @classmethod
    def from_source(cls, src: str, config_path: Optional[str] = None) -> "ReplConfig":
        """Build a config from .sapphirerc source text."""
        where = config_path or "<config>"
        try:
            program = parse(src)
        except ParseError as e:
            raise ValueError(f"Failed to parse {where}: {e}") from e

        values: dict[str, Any] = {}
        for form in program[1:]:
            if (
                not isinstance(form, tuple)
                or len(form) != 2
                or not isinstance(form[0], Symbol)
            ):
                raise ValueError(f"{where}: expected (key value), got {form!r}")
            key = form[0].name
            if key not in _FIELDS:
                raise ValueError(f"{where}: unknown setting {key}")
            field_name, validate = _FIELDS[key]
            try:
                values[field_name] = validate(key, form[1])
            except ValueError as e:
                raise ValueError(f"{where}: {e}") from None

        return cls(config_path=config_path, **values)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "ReplConfig":
        """
        Load settings from a .sapphirerc file.

        Args:
            path: The config file, a directory to search upward from, or None
                  to search upward from the current directory.

        Returns:
            The loaded config, or the defaults if no file was found.

        Raises:
            FileNotFoundError: If path is given but does not exist.
            ValueError: If the file is malformed.
        """
        if path is None:
            config_file = find_config_file()
        elif os.path.isfile(path):
            config_file = os.path.abspath(path)
        elif os.path.isdir(path):
            config_file = find_config_file(path)
        else:
            raise FileNotFoundError(f"Path does not exist: {path}")

        if config_file is None:
            return cls()

        with open(config_file, encoding="utf-8") as f:
            content = f.read()

        return cls.from_source(content, config_file)


def load_config(path: Optional[str] = None) -> ReplConfig:
    """Convenience function to load a ReplConfig."""
    return ReplConfig.load(path)
