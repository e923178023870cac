# gxtexconv

Converts ordinary images (PNG, BMP, JPEG and anything else Pillow can read)
into TPL texture files for the GameCube and Wii graphics hardware. Textures can
be stored in any of the hardware's colour formats, with optional mipmap chains
and colour-indexed palettes.

## Installation

```
pip install .
```

Run the tests with `pip install .[test]` and `pytest`.

## Converting a single image

```
gxtexconv -i picture.png -o picture.tpl colfmt=6
```

If `-o` is left out, the output name is the input name up to its first `.`
followed by `.tpl`. The texture id is the output name up to its first `.`.

Options after the file names are `key=value` pairs:

- `colfmt=<n>`: texture format (default 6, RGBA8)
- `palfmt=<n>`: palette format for the colour-indexed formats (default 1)
- `mipmap=yes`, followed by any of `minlod=<n>`, `maxlod=<n>`,
  `remaplod=<n>`: build a mipmap chain

Alongside the `.tpl` file a `.h` header is written that defines one index per
texture id (`#define <id> <index>`).

Run with fewer than two arguments, the command prints its usage text and exits
with status 0. Errors (no input file, an image that cannot be loaded, invalid
mipmap settings) are printed and the command exits with status 1.

## Converting many images with a script

```
gxtexconv -s textures.scf -o textures.tpl -d textures.d
```

A script lists one texture per `< ... />` element; lines starting with `#` are
comments:

```
# background and sprites
<filepath="bg.png" id="BG" colfmt=4 />
<filepath="font.png" id="FONT" colfmt=5 mipmap=yes minlod=0 maxlod=2 />
```

Each element takes `filepath`, `id`, `colfmt`, `palfmt`, `mipmap`, `minlod`,
`maxlod` and `remaplod` as above, and `xsize` and `ysize` to scale the image
first. Names are case-insensitive; values may be quoted to hold spaces.

Image paths are resolved relative to the script's directory, and each image is
loaded only once. With `-d`, a make-style dependency file is written listing
the script and every image it used.

## Images and mipmaps

Images are converted to RGBA and scaled up bilinearly so that both sides are
multiples of four. Mipmapped textures need power-of-two sides of at most 1024,
LOD values between 0 and 10, and an image large enough for `maxlod`.

## Supported texture formats

| value | format |
|-------|--------|
| 0  | I4 (intensity, 4 bit) |
| 1  | I8 (intensity, 8 bit) |
| 2  | IA4 (intensity + alpha, 4 bit) |
| 3  | IA8 (intensity + alpha, 8 bit) |
| 4  | RGB565 |
| 5  | RGB5A3 |
| 6  | RGBA8 |
| 8  | CI4 (colour indexed, 4 bit) |
| 9  | CI8 (colour indexed, 8 bit) |
| 14 | CMPR (DXT1 compressed, alpha ignored) |

Palettes for CI4 and CI8 are made by quantizing the image with Pillow and are
written for palette formats 1 (RGB565) and 2 (RGB5A3).

## Using it from Python

```python
from gxtexconv.parser import Parser
from gxtexconv.converter import Converter

parser = Parser()
parser.parse(["-i", "picture.png", "colfmt=14"])
converter = Converter(parser)
converter.generate_textures()
converter.write_textures()
```

`Parser.parse` takes the arguments without the program name and raises
`ParserError`; the converter raises `ConversionError`. Lower-level pieces:

- `gxtexconv.image`: `load_image` and `Image` (resizing, error diffusion,
  palette quantization)
- `gxtexconv.texture`: `Texture`, `Layer` and the `ColorFormat`,
  `PaletteFormat`, `WrapMode` and `FilterMode` enums
- `gxtexconv.texturefile`: `compute_layout`, `image_buffer_size` and
  `dxt1_compress`
- `gxtexconv.tfbinarytdf`: `encode_texture`, `encode_palette`, `build_tpl`,
  `write_tpl` and `write_index_header`

The `gxtexconv.squish` sub-package holds a pure Python DXT block compressor:
`ColourSet`, `RangeFit`, `ClusterFit`, the colour block helpers in
`colourblock` and the DXT3/DXT5 alpha block helpers in `alpha`.

## What it does not do

- It writes only TPL files and their index headers; there is no output of
  separate raw per-texture data or per-texture headers.
- The squish sub-package works on single 4x4 blocks; only whole-image DXT1
  compression (`dxt1_compress`) is provided. Being pure Python, CMPR
  conversion of large images is slow.
- IA8 palettes (`palfmt=0`) are not written.