import json

import pytest

from spriteatlas.core import ColorKey, NamedSprite, PipelineSettings, PixelBuffer
from spriteatlas.core.atlas_compiler import compile_atlas, extract_frame
from spriteatlas.core.errors import DecodeError, ValidationError
from spriteatlas.core.manifest_writer import write_atlas, write_tiles
from spriteatlas.core.pipeline import resolve_cuts, run_sheet_pipeline
from spriteatlas.utils import image_io


def test_write_atlas_pairs_image_and_json(tmp_path, random_buffer):
    atlas = compile_atlas([NamedSprite("a", random_buffer(5, 7)), NamedSprite("b", random_buffer(3, 3))], padding=1)
    image_path, manifest_path = write_atlas(atlas, tmp_path / "out")

    assert image_path == tmp_path / "out" / "atlas.png"
    assert manifest_path == tmp_path / "out" / "atlas.json"
    assert image_io.load_buffer(image_path) == atlas.image
    text = manifest_path.read_text(encoding="utf-8")
    assert json.loads(text) == atlas.to_metadata()
    assert text.startswith('{\n  "frames"')


def test_write_atlas_uses_custom_image_name(tmp_path):
    atlas = compile_atlas([NamedSprite("a", PixelBuffer.blank(2, 2))], padding=0, image_name="hero.png")
    image_path, manifest_path = write_atlas(atlas, tmp_path)
    assert (image_path.name, manifest_path.name) == ("hero.png", "hero.json")


def test_write_tiles_numbers_files(tmp_path, random_buffer):
    tiles = [random_buffer(4, 4) for _ in range(3)]
    paths = write_tiles(tiles, tmp_path / "tiles")
    assert [p.name for p in paths] == ["0.png", "1.png", "2.png"]
    assert [image_io.load_buffer(p) for p in paths] == tiles


def test_load_buffer_errors(tmp_path):
    with pytest.raises(ValidationError):
        image_io.load_buffer(tmp_path / "missing.png")
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    with pytest.raises(DecodeError):
        image_io.load_buffer(broken)


def test_resolve_cuts_prefers_explicit_positions(tmp_path):
    buffer = PixelBuffer.blank(30, 20)
    explicit = PipelineSettings(tmp_path, tmp_path, horizontal_cuts=[0, 5, 20], vertical_cuts=[2, 30])
    assert resolve_cuts(buffer, explicit) == ([0, 5, 20], [2, 30])

    grid = PipelineSettings(tmp_path, tmp_path, rows=2, columns=3)
    assert resolve_cuts(buffer, grid) == ([0, 10, 20], [0, 10, 20, 30])

    assert resolve_cuts(buffer, PipelineSettings(tmp_path, tmp_path)) == ([0, 20], [0, 30])


def test_sheet_pipeline_end_to_end(tmp_path, sheet_buffer):
    source = image_io.save_buffer(sheet_buffer(rows=2, columns=3), tmp_path / "sheet.png")
    settings = PipelineSettings(
        input_path=source,
        output_dir=tmp_path / "atlas",
        color_keys=[ColorKey(255, 0, 255, tolerance=0)],
        rows=2,
        columns=3,
        padding=1,
        character="hero",
    )
    atlas, image_path, manifest_path = run_sheet_pipeline(settings)

    document = json.loads(manifest_path.read_text(encoding="utf-8"))
    assert sorted(document["frames"]) == [
        "hero_idle_0",
        "hero_idle_1",
        "hero_idle_2",
        "hero_run_0",
        "hero_run_1",
        "hero_run_2",
    ]
    assert image_path.exists()

    tile = extract_frame(atlas, "hero_run_1")
    assert tile.size == (16, 16)
    assert tile.pixel(8, 8) == (30, 30, 40, 255)
    assert tile.pixel(0, 0)[3] == 0


def test_sheet_pipeline_rejects_empty_character(tmp_path):
    with pytest.raises(ValidationError):
        run_sheet_pipeline(PipelineSettings(tmp_path / "in.png", tmp_path, character=""))
