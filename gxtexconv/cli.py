"""Command line entry point of the texture converter."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from gxtexconv.converter import ConversionError, Converter
from gxtexconv.parser import Parser, ParserError

_USAGE = """\
gxtexconv v0.1.7

usage: gxtexconv -i <imagepath> [-o <outputfile>.tpl colfmt=<texfmt> mipmap=yes \
minlod=<min level> maxlod=<max level> width=<newwidth> height=<newheight> \
[palfmt=<palcolfmt>]]
       gxtexconv -s <scriptfile>.scf [-d <dependency file>][-o <outputfile>.tpl]

       supported texture formats:
       0:  I4 (Intensity 4bit)
       1:  I8 (Intensity 8bit)
       2:  IA4 (Intensity + Alpha 4bit)
       3:  IA8 (Intensity + Alpha 8bit)
       4:  RGB565 (R5G6B5)
       5:  RGB5A3 (R5G5B5 or A3R4G4B4)
       6:  RGBA8  (A8R8G8B8)
       8:  CI4 (Color Indexed 4bit)
       9:  CI8 (Color Indexed 8bit)
       14: CMPR (Compressed Format)
"""


def usage() -> None:
    """Print the usage text to standard error."""
    sys.stderr.write(_USAGE)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the converter; return the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        usage()
        return 0

    parser = Parser()
    try:
        parser.parse(args)
        converter = Converter(parser)
        converter.generate_textures()
        converter.write_textures()
    except (ParserError, ConversionError) as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())