"""Command-line entry point for sprite sheet and atlas workflows."""

import argparse
import logging
import sys
from pathlib import Path

from spriteatlas.core import DEFAULT_IMAGE_NAME, DEFAULT_PADDING, NamedSprite, PipelineSettings
from spriteatlas.core import atlas_compiler, color_key, grid_slicer, manifest_writer, pipeline
from spriteatlas.core.errors import ProcessingError, ValidationError
from spriteatlas.main import configure_logging
from spriteatlas.utils import file_tools, image_io, validators

logger = logging.getLogger("sprite2atlas")


def _argument_type(parse):
    """Adapt a validator so argparse reports its message as a usage error."""

    def convert(value: str):
        try:
            return parse(value)
        except ValidationError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    convert.__name__ = parse.__name__
    return convert


_color_key = _argument_type(validators.parse_color_key)
_cut_list = _argument_type(validators.parse_cut_list)
_positive_int = _argument_type(lambda value: validators.parse_optional_int(value, "Value"))
_padding = _argument_type(lambda value: validators.parse_non_negative_int(value, "Padding"))


def _add_key_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--key",
        dest="keys",
        type=_color_key,
        action="append",
        default=[],
        metavar="R,G,B[,TOL]",
        help="Background color to make transparent; repeat for more, first match wins (TOL 0-100, default 30)",
    )


def _add_grid_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--rows", type=_positive_int, help="Split into this many equal rows")
    parser.add_argument("--cols", type=_positive_int, help="Split into this many equal columns")
    parser.add_argument("--h-cuts", type=_cut_list, metavar="Y0,Y1,...", help="Explicit y cut positions, boundaries included")
    parser.add_argument("--v-cuts", type=_cut_list, metavar="X0,X1,...", help="Explicit x cut positions, boundaries included")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse arguments and show plan without rendering outputs",
    )
    common.add_argument("--verbose", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(
        prog="sprite2atlas",
        description="Remove backgrounds, slice sprite sheets and pack frames into a texture atlas.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    remove = commands.add_parser("remove-colors", parents=[common], help="Make keyed colors transparent")
    remove.add_argument("input", type=Path, help="Source image")
    remove.add_argument("output", type=Path, nargs="?", help="Destination PNG (default: <stem>_keyed.png)")
    _add_key_argument(remove)
    remove.set_defaults(handler=run_remove_colors)

    slicer = commands.add_parser("slice", parents=[common], help="Cut a sheet into numbered tiles")
    slicer.add_argument("input", type=Path, help="Source sprite sheet")
    slicer.add_argument("output_dir", type=Path, help="Directory for 0.png, 1.png, ...")
    _add_grid_arguments(slicer)
    _add_key_argument(slicer)
    slicer.set_defaults(handler=run_slice)

    pack = commands.add_parser("pack", parents=[common], help="Pack images into an atlas")
    pack.add_argument("output_dir", type=Path, help="Directory for the atlas image and JSON")
    pack.add_argument("images", type=Path, nargs="+", help="Sprite images or directories of them; names are file stems")
    pack.add_argument("--padding", type=_padding, default=DEFAULT_PADDING, help="Transparent margin per sprite (default: 2)")
    pack.add_argument("--image-name", default=DEFAULT_IMAGE_NAME, help="Atlas image file name (default: atlas.png)")
    pack.set_defaults(handler=run_pack)

    sheet = commands.add_parser("sheet", parents=[common], help="Key, slice and pack one character sheet")
    sheet.add_argument("input", type=Path, help="Source sprite sheet; each row is one action")
    sheet.add_argument("output_dir", type=Path, help="Directory for the atlas image and JSON")
    _add_grid_arguments(sheet)
    _add_key_argument(sheet)
    sheet.add_argument("--character", default="character", help="Prefix for frame names (default: character)")
    sheet.add_argument("--padding", type=_padding, default=DEFAULT_PADDING, help="Transparent margin per sprite (default: 2)")
    sheet.add_argument("--image-name", default=DEFAULT_IMAGE_NAME, help="Atlas image file name (default: atlas.png)")
    sheet.set_defaults(handler=run_sheet)
    return parser


def _settings_from_args(args: argparse.Namespace) -> PipelineSettings:
    validators.validate_slice_mode(args.rows, args.cols, args.h_cuts, args.v_cuts)
    return PipelineSettings(
        input_path=args.input,
        output_dir=args.output_dir,
        color_keys=list(args.keys),
        horizontal_cuts=args.h_cuts,
        vertical_cuts=args.v_cuts,
        rows=args.rows,
        columns=args.cols,
        padding=getattr(args, "padding", DEFAULT_PADDING),
        character=getattr(args, "character", "character"),
        image_name=getattr(args, "image_name", DEFAULT_IMAGE_NAME),
    )


def run_remove_colors(args: argparse.Namespace) -> int:
    buffer = image_io.load_buffer(args.input)
    output = args.output or file_tools.default_output_path(args.input)
    image_io.save_buffer(color_key.remove_colors(buffer, args.keys), output)
    logger.info("Wrote %s", output)
    return 0


def run_slice(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    buffer = color_key.remove_colors(image_io.load_buffer(settings.input_path), settings.color_keys)
    horizontal, vertical = pipeline.resolve_cuts(buffer, settings)
    manifest_writer.write_tiles(grid_slicer.slice_grid(buffer, horizontal, vertical), settings.output_dir)
    return 0


def run_pack(args: argparse.Namespace) -> int:
    paths = file_tools.expand_image_paths(args.images, image_io.ALLOWED_IMAGE_EXTENSIONS)
    sprites = [NamedSprite(name=path.stem, buffer=image_io.load_buffer(path)) for path in paths]
    atlas = atlas_compiler.compile_atlas(sprites, args.padding, image_name=args.image_name)
    manifest_writer.write_atlas(atlas, args.output_dir)
    return 0


def run_sheet(args: argparse.Namespace) -> int:
    pipeline.run_sheet_pipeline(_settings_from_args(args))
    return 0


def describe_plan(args: argparse.Namespace) -> str:
    """Summarise what a command would do."""

    lines = [f"command: {args.command}"]
    for name, value in sorted(vars(args).items()):
        if name in {"command", "handler", "dry_run", "verbose"} or value in (None, []):
            continue
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        lines.append(f"  {name}: {value}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.dry_run:
        print(describe_plan(args))
        return 0

    try:
        return args.handler(args)
    except (ValueError, ProcessingError) as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
