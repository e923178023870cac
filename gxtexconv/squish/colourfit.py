"""Common driver for the DXT colour block fitters."""

from __future__ import annotations

import abc
from typing import Optional

from gxtexconv.squish.colourset import ColourSet, SquishFlags


class ColourFit(abc.ABC):
    """Chooses between three- and four-colour encodings of a colour set.

    Subclasses implement ``_compress3`` and ``_compress4``; each stores a
    block in ``self._block`` when its encoding beats what is already there.
    """

    def __init__(self, colours: ColourSet, flags: int) -> None:
        self.colours = colours
        self.flags = int(flags)
        self._block: Optional[bytes] = None

    def compress(self) -> bytes:
        """Return the best 8-byte colour block for the colour set."""
        if self.flags & SquishFlags.DXT1:
            self._compress3()
            if not self.colours.transparent:
                self._compress4()
        else:
            self._compress4()
        return self._block if self._block is not None else bytes(8)

    @abc.abstractmethod
    def _compress3(self) -> None:
        """Try the three-colour encoding."""

    @abc.abstractmethod
    def _compress4(self) -> None:
        """Try the four-colour encoding."""