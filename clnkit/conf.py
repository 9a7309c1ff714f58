"""Reading, editing and writing node configuration files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, "os.PathLike[str]"]

_GENERATED_HEADER = (
    "# core lightning configuration generated by coffe please do not edit this"
)
_COMMENT = "comment"
_INCLUDE = "include"


class ParsingError(Exception):
    """A configuration file could not be read, parsed or changed.

    Code 1 means the file could not be read; code 2 means its content or the
    requested change is invalid.
    """

    def __init__(self, code: int, cause: str) -> None:
        super().__init__(cause)
        self.code = code
        self.cause = cause

    def __str__(self) -> str:
        return self.cause


class ClnConf:
    """A configuration file: ordered `key=value` fields and included files."""

    def __init__(self, path: PathLike, create_if_missing: bool = False) -> None:
        self.path = os.fspath(path)
        self.create_if_missing = create_if_missing
        self.fields: dict[str, list[str]] = {}
        self.includes: list[ClnConf] = []

    def __repr__(self) -> str:
        return (
            f"ClnConf(path={self.path!r}, fields={self.fields!r}, "
            f"includes={[include.path for include in self.includes]!r})"
        )

    def parser(self) -> "ConfParser":
        """Return a parser reading this configuration's file."""
        return ConfParser(self.path, self.create_if_missing)

    def parse(self) -> None:
        """Load the fields and includes found in the file."""
        self.parser().parse(self)

    def add_conf(self, key: str, val: str) -> None:
        """Add a value to a field; the same value may not appear twice."""
        values = self.fields.get(key)
        if values is None:
            self.fields[key] = [val]
            return
        if val in values:
            raise ParsingError(2, f"field {key} with value {val} already present")
        values.append(val)

    def get_conf(self, key: str) -> list[str]:
        """Return every value of a field, here and in the included files."""
        results = list(self.fields.get(key, ()))
        for include in self.includes:
            results.extend(include.get_conf(key))
        return results

    def add_subconf(self, conf: "ClnConf") -> None:
        """Include another configuration; each path may be included once."""
        if any(conf.path == include.path for include in self.includes):
            raise ParsingError(2, f"duplicate include {conf.path}")
        self.includes.append(conf)

    def rm_conf(self, key: str, val: Optional[str] = None) -> None:
        """Remove one value of a field, or the whole field when no value is given."""
        values = self.fields.get(key)
        if values is None:
            raise ParsingError(2, f"field with `{key}` not present")
        if val is None:
            del self.fields[key]
            return
        try:
            values.remove(val)
        except ValueError:
            raise ParsingError(2, f"field {key} with value {val} not found") from None

    def flush(self) -> None:
        """Write the configuration back to its file."""
        with open(self.path, "w", encoding="utf-8", newline="") as handle:
            handle.write(str(self))

    def __str__(self) -> str:
        lines: list[str] = []
        for field, values in self.fields.items():
            if field.startswith(_COMMENT):
                lines.append(f"{values[0]}\n")
                continue
            lines.extend(f"{field}={value}\n" if value else f"{field}\n" for value in values)
        lines.extend(f"include {include.path}\n" for include in self.includes)
        return "".join(lines) + "\n"


class ConfParser:
    """Parser for the line-based `key=value` configuration syntax."""

    def __init__(self, file_path: PathLike, create_if_missing: bool = False) -> None:
        self.path = Path(file_path)
        self.create_if_missing = create_if_missing

    def _read(self) -> str:
        try:
            if self.create_if_missing and not self.path.exists():
                with open(self.path, "w", encoding="utf-8", newline="") as handle:
                    handle.write(_GENERATED_HEADER)
            with open(self.path, encoding="utf-8", newline="") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise ParsingError(1, str(exc)) from exc

    def _words(self) -> list[str]:
        words: list[str] = []
        for line in self._read().split("\n"):
            if not line:
                continue
            if line.startswith("#"):
                words.append(f"{_COMMENT} {line}")
            elif line.startswith(_INCLUDE):
                words.append(line)
            else:
                key, _, value = line.partition("=")
                words.extend((key, value))
        return words

    def parse(self, conf: ClnConf) -> None:
        """Read the file and add what it holds to `conf`."""
        words = iter(self._words())
        for key in words:
            if key.startswith(_COMMENT):
                prefix = f"{_COMMENT} "
                if not key.startswith(prefix):
                    raise ParsingError(2, f"malformed comment entry `{key}`")
                conf.add_conf(key, key[len(prefix):].strip())
            elif key.startswith(_INCLUDE):
                prefix = f"{_INCLUDE} "
                if not key.startswith(prefix):
                    raise ParsingError(2, f"malformed include entry `{key}`")
                subconf = ClnConf(key[len(prefix):].strip(), False)
                subconf.parse()
                conf.add_subconf(subconf)
            else:
                value = next(words, None)
                if value is None:
                    raise ParsingError(2, f"missing value for field `{key}`")
                conf.add_conf(key, value)