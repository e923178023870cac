import pytest
from PIL import Image as PILImage

from gxtexconv.converter import ConversionError, Converter
from gxtexconv.parser import Parser
from gxtexconv.texture import ColorFormat
from gxtexconv.tokenstring import TokenString


def _png(path, size, color=(200, 100, 50, 255)):
    PILImage.new("RGBA", size, color).save(path)
    return path


def _converter(tmp_path, *entries):
    parser = Parser()
    parser.script_path = f"{tmp_path}/"
    parser.input_filename = str(tmp_path / "job.scf")
    parser.output_filename = str(tmp_path / "out.tpl")
    parser.entries = [TokenString(entry) for entry in entries]
    return Converter(parser)


def test_single_texture_one_layer(tmp_path):
    _png(tmp_path / "a.png", (8, 8))
    converter = _converter(tmp_path, 'filepath="a.png" id="tex" colfmt=4')
    textures = converter.generate_textures()
    assert len(textures) == 1
    texture = textures[0]
    assert texture.id == "tex"
    assert texture.color_format == ColorFormat.RGB565
    assert [(layer.width, layer.height) for layer in texture.layers] == [(8, 8)]


def test_default_format_and_palette(tmp_path):
    _png(tmp_path / "a.png", (4, 4))
    converter = _converter(tmp_path, 'filepath="a.png"', 'filepath="a.png" colfmt=8')
    first, second = converter.generate_textures()
    assert first.color_format == ColorFormat.RGBA8
    assert first.id == "0"
    assert first.palette_format is None
    assert second.palette_format == 1


def test_mipmap_layers(tmp_path):
    _png(tmp_path / "a.png", (16, 16))
    converter = _converter(tmp_path, 'filepath="a.png" mipmap=yes minlod=0 maxlod=2')
    texture = converter.generate_textures()[0]
    assert [layer.width for layer in texture.layers] == [16, 8, 4]
    assert all(layer.image.width == layer.width for layer in texture.layers)


def test_mipmap_needs_power_of_two(tmp_path):
    _png(tmp_path / "a.png", (12, 12))
    converter = _converter(tmp_path, 'filepath="a.png" mipmap=yes maxlod=1')
    with pytest.raises(ConversionError):
        converter.generate_textures()


def test_mipmap_lod_out_of_range(tmp_path):
    _png(tmp_path / "a.png", (16, 16))
    converter = _converter(tmp_path, 'filepath="a.png" mipmap=yes maxlod=11')
    with pytest.raises(ConversionError):
        converter.generate_textures()


def test_missing_image(tmp_path):
    converter = _converter(tmp_path, 'filepath="missing.png"')
    with pytest.raises(ConversionError):
        converter.generate_textures()


def test_xsize_resizes_source(tmp_path):
    _png(tmp_path / "a.png", (8, 8))
    converter = _converter(tmp_path, 'filepath="a.png" xsize=16 ysize=16')
    texture = converter.generate_textures()[0]
    assert (texture.image.width, texture.image.height) == (16, 16)


def test_generate_texture_uses_width_and_height(tmp_path):
    _png(tmp_path / "a.png", (8, 8))
    converter = _converter(tmp_path)
    texture = converter.generate_texture(TokenString('filepath="a.png" width=4 height=4'))
    assert (texture.image.width, texture.image.height) == (4, 4)
    assert converter.textures == [texture]


def test_source_images_are_shared(tmp_path):
    _png(tmp_path / "a.png", (4, 4))
    converter = _converter(tmp_path, 'filepath="a.png" id=x', 'filepath="A.PNG" id=y')
    first, second = converter.generate_textures()
    assert first.image is second.image
    assert converter.dependencies == [f"{tmp_path}/a.png"]


def test_write_without_textures(tmp_path):
    with pytest.raises(ConversionError):
        _converter(tmp_path).write_textures()


def test_write_textures_with_deps(tmp_path):
    _png(tmp_path / "a.png", (4, 4))
    converter = _converter(tmp_path, 'filepath="a.png" id="tex"')
    converter.parser.deps_filename = str(tmp_path / "out.d")
    converter.generate_textures()
    converter.write_textures()

    assert (tmp_path / "out.tpl").stat().st_size > 0
    assert (tmp_path / "out.h").read_text() == "#define tex 0\n"
    deps = (tmp_path / "out.d").read_text()
    parser = converter.parser
    assert deps == (
        f"{parser.output_filename}: \\\n {parser.input_filename} "
        f"\\\n  {tmp_path}/a.png \n"
    )
    assert converter.dependencies == []