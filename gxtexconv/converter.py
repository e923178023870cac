"""Turning parsed texture entries into textures and writing them out."""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from gxtexconv.image import Image, ImageLoadError, load_image
from gxtexconv.parser import Parser
from gxtexconv.texture import PALETTED_FORMATS, Texture
from gxtexconv.tfbinarytdf import write_tpl
from gxtexconv.tokenstring import TokenString

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_MAX_LOD = 10
_MAX_SIZE = 1024
_POWERS_OF_TWO = frozenset(1 << n for n in range(11))


class ConversionError(Exception):
    """Raised when a texture cannot be generated or written."""


def _atoi(text: Optional[str]) -> int:
    match = _INT_PREFIX.match(text or "")
    return int(match.group(1)) if match else 0


class Converter:
    """Builds textures from the entries of a parser and writes the texture file."""

    def __init__(self, parser: Parser) -> None:
        self.parser = parser
        self.textures: List[Texture] = []
        self.dependencies: List[str] = []
        self._sources: Dict[str, Image] = {}

    def _get_image(self, name: Optional[str]) -> Image:
        if name is None:
            raise ConversionError("texture entry has no filepath")
        key = name.lower()
        if key in self._sources:
            return self._sources[key]
        path = self.parser.script_path + name
        try:
            image = load_image(path)
        except ImageLoadError as exc:
            raise ConversionError(f"error loading {name}.") from exc
        self._sources[key] = image
        self.dependencies.append(path)
        return image

    def _generate(self, entry: TokenString, width_key: str, height_key: str) -> Texture:
        image = self._get_image(entry.get("filepath"))

        width = _atoi(entry.get(width_key, "-1"))
        height = _atoi(entry.get(height_key, "-1"))
        if width != -1 and height != -1 and (width, height) != (image.width, image.height):
            image.resize(width, height)

        texture = Texture(id=entry.get("id", "0"), image=image)
        texture.color_format = _atoi(entry.get("colfmt", "6"))
        if texture.color_format in PALETTED_FORMATS:
            texture.palette_format = _atoi(entry.get("palfmt", "1"))
        self.textures.append(texture)

        if entry.get("mipmap", "no").lower() == "yes":
            texture.min_lod = _atoi(entry.get("minlod", "0"))
            texture.max_lod = _atoi(entry.get("maxlod", "0"))
            texture.remap_lod = _atoi(entry.get("remaplod", "0"))
            self._generate_mipmaps(texture)
        else:
            texture.add_layer(image.width, image.height, image)
        return texture

    def _generate_mipmaps(self, texture: Texture) -> None:
        lods = (texture.min_lod, texture.max_lod, texture.remap_lod)
        if any(not 0 <= lod <= _MAX_LOD for lod in lods):
            raise ConversionError(f"texture {texture.id}: LOD values must be between 0 and 10")
        if texture.min_lod > texture.max_lod:
            return
        if texture.remap_lod + texture.max_lod - texture.min_lod > _MAX_LOD:
            raise ConversionError(f"texture {texture.id}: remapped LOD range exceeds 10")

        width, height = texture.image.width, texture.image.height
        if any(lods):
            if width not in _POWERS_OF_TWO or height not in _POWERS_OF_TWO:
                raise ConversionError(
                    f"texture {texture.id}: mipmapped textures need power-of-two sides"
                )
        elif width > _MAX_SIZE or height > _MAX_SIZE:
            raise ConversionError(f"texture {texture.id}: image larger than 1024 pixels")

        if texture.max_lod and (not width >> texture.max_lod or not height >> texture.max_lod):
            raise ConversionError(f"texture {texture.id}: image too small for max LOD")

        for level in range(texture.min_lod, texture.max_lod + 1):
            texture.add_layer(width >> level, height >> level, texture.image)

    def generate_texture(self, entry: TokenString) -> Texture:
        """Build one texture from an entry, sized by its ``width`` and ``height`` tokens."""
        return self._generate(entry, "width", "height")

    def generate_textures(self) -> List[Texture]:
        """Build a texture for every parser entry, sized by ``xsize`` and ``ysize``."""
        for entry in self.parser.entries:
            self._generate(entry, "xsize", "ysize")
        return self.textures

    def write_textures(self) -> None:
        """Write the texture file, its index header and, if asked for, a dependency file."""
        if not self.textures:
            raise ConversionError("no textures to write")
        output = self.parser.output_filename
        try:
            write_tpl(self.textures, output)
        except OSError as exc:
            raise ConversionError(f"cannot write {output}: {exc}") from exc

        deps_filename = self.parser.deps_filename
        if deps_filename:
            text = f"{output}: \\\n {self.parser.input_filename} "
            text += "".join(f"\\\n  {dep} " for dep in self.dependencies)
            text += "\n"
            try:
                with open(deps_filename, "w", newline="") as deps:
                    deps.write(text)
            except OSError as exc:
                raise ConversionError(f"cannot write {deps_filename}: {exc}") from exc
            self.dependencies.clear()