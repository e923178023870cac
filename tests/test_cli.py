import struct

from PIL import Image as PILImage

from gxtexconv.cli import main, usage
from gxtexconv.texturefile import TPL_VERSION


def test_usage_lists_formats(capsys):
    usage()
    err = capsys.readouterr().err
    assert "usage: gxtexconv -i <imagepath>" in err
    assert "14: CMPR (Compressed Format)" in err


def test_too_few_arguments_prints_usage(capsys):
    assert main([]) == 0
    assert "usage:" in capsys.readouterr().err


def test_convert_single_image(tmp_path):
    source = tmp_path / "pic.png"
    PILImage.new("RGBA", (8, 8), (1, 2, 3, 255)).save(source)
    out = tmp_path / "out.tpl"

    assert main(["-i", str(source), "-o", str(out), "colfmt=4"]) == 0
    data = out.read_bytes()
    assert struct.unpack_from(">II", data, 0) == (TPL_VERSION, 1)
    assert (tmp_path / "out.h").read_text().startswith("#define ")


def test_convert_script(tmp_path):
    PILImage.new("RGBA", (4, 4), (9, 9, 9, 255)).save(tmp_path / "a.png")
    script = tmp_path / "job.scf"
    script.write_text('# textures\n<filepath="a.png" id="tex_a" colfmt=4 />\n')
    out = tmp_path / "job.tpl"

    assert main(["-s", str(script), "-o", str(out)]) == 0
    assert out.exists()
    assert (tmp_path / "job.h").read_text() == "#define tex_a 0\n"


def test_missing_script_fails(tmp_path, capsys):
    assert main(["-s", str(tmp_path / "none.scf")]) == 1
    assert capsys.readouterr().err


def test_missing_image_fails(tmp_path):
    out = tmp_path / "out.tpl"
    assert main(["-i", str(tmp_path / "none.png"), "-o", str(out)]) == 1
    assert not out.exists()