"""Command line and script file parsing for texture conversion jobs."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Union

from gxtexconv.tokenstring import TokenString

_WHITESPACE = frozenset(" \t\n\v\f\r")


class ParserError(Exception):
    """Raised when the arguments or a script file cannot be used."""


class Parser:
    """Collects the texture entries to convert and the file names involved."""

    def __init__(self) -> None:
        self.input_filename = ""
        self.output_filename = ""
        self.deps_filename = ""
        self.script_path = ""
        self.entries: List[TokenString] = []

    def parse(self, argv: Sequence[str]) -> None:
        """Parse command line arguments (without the program name)."""
        args = list(argv)
        use_script = False
        position = 0
        while position < len(args):
            arg = args[position]
            if arg.startswith("-") and len(arg) > 1 and arg[1] in "isod":
                value = args[position + 1] if position + 1 < len(args) else ""
                position += 1
                flag = arg[1]
                if flag == "i":
                    use_script = False
                    self.input_filename = value
                elif flag == "s":
                    use_script = True
                    self.input_filename = value
                elif flag == "o":
                    self.output_filename = value
                else:
                    self.deps_filename = value
            position += 1

        if not self.input_filename:
            raise ParserError("no input file given")

        if not self.output_filename:
            self.output_filename = self.input_filename.split(".", 1)[0] + ".tpl"

        if use_script:
            self.load_script(self.input_filename)
        else:
            self.entries = [TokenString(self._command_line_entry(args))]

    def _command_line_entry(self, args: Sequence[str]) -> str:
        texture_id = self.output_filename.split(".", 1)[0]
        colfmt = "colfmt=6"
        palfmt = ""
        mipmap = ""
        lods: List[str] = []
        mipmapped = False

        for arg in args:
            if arg.startswith("-"):
                continue
            lowered = arg.lower()
            if lowered.startswith("colfmt="):
                colfmt = arg
            if lowered.startswith("palfmt="):
                palfmt = arg
            elif lowered.startswith("mipmap=yes"):
                mipmap = arg
                mipmapped = True
            elif mipmapped and lowered.startswith(("minlod=", "maxlod=", "remaplod=")):
                lods.append(arg)

        parts = [f'filepath="{self.input_filename}"', f'id="{texture_id}"', colfmt]
        if palfmt:
            parts.append(palfmt)
        if mipmapped:
            parts.append(mipmap)
            parts.extend(lods)
        return " ".join(parts)

    def load_script(self, path: Union[str, Path]) -> None:
        """Read texture entries from a script file."""
        path = str(path)
        try:
            with open(path, "rb") as script:
                content = script.read()
        except OSError as exc:
            raise ParserError(f"cannot read script {path}: {exc}") from exc

        separator = max(path.rfind("/"), path.rfind("\\"))
        self.script_path = path[:separator] + "/" if separator >= 0 else ""

        if not content:
            raise ParserError(f"script {path} is empty")
        self.load_buffer(content.decode("latin-1"))

    def load_buffer(self, text: str) -> None:
        """Read texture entries of the form ``<name=value ... />`` from text.

        Lines starting with ``#`` are comments.
        """
        self.entries = []
        if not text:
            raise ParserError("script is empty")

        size = len(text)

        def char(index: int) -> Optional[str]:
            return text[index] if 0 <= index < size else None

        start = 0
        while start < size:
            while start < size and text[start] in _WHITESPACE:
                start += 1

            end = start
            if char(start) == "<":
                while end < size and char(end - 1) != "/" and text[end] != ">":
                    end += 1
            else:
                while end < size and text[end] not in "\n\r":
                    end += 1

            if end == start or char(start) == "#":
                while end < size and text[end] not in "\n\r":
                    end += 1

            if char(start) == "<" and char(end - 1) == "/" and char(end) == ">":
                self.entries.append(TokenString(text[start + 1:end - 1]))

            start = end + 1