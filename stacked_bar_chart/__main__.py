import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from stacked_bar_chart import (
    ChartConfig,
    ChartError,
    ParseError,
    __version__,
    parse_chart,
    render_chart,
    validate,
)

logger = logging.getLogger(__name__)

_ANSI_COLORS = {
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}
_ANSI_RESET = "\033[0m"


class _CliFormatter(logging.Formatter):
    """``warning: …`` / ``error: …`` lines, colored when the stream allows it."""

    def __init__(self, use_color: bool) -> None:
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname.lower()
        if record.levelno >= logging.WARNING:
            text = f"{level}: {record.getMessage()}"
        else:
            text = f"{level}:{record.name}: {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        color = _ANSI_COLORS.get(record.levelno)
        if self.use_color and color:
            return f"{color}{text}{_ANSI_RESET}"
        return text


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() not in ("", "0", "false", "no")


def _configure_logging(level: str, use_color: bool) -> None:
    log_level = getattr(logging, level.upper(), logging.WARNING)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_CliFormatter(use_color))
    logging.basicConfig(level=log_level, handlers=[handler], force=True)


def _read_input(path: Optional[str]) -> str:
    source = "stdin" if path is None or path == "-" else f"'{path}'"
    try:
        if path is None or path == "-":
            return sys.stdin.read()
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"{source} is not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
    except OSError as exc:
        raise OSError(f"unable to open file '{path}': {exc.strerror or exc}") from exc


def _write_output(path: Optional[str], text: str) -> None:
    if path is None or path == "-":
        sys.stdout.write(text)
        return
    output_path = Path(path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OSError(f"unable to create file '{path}': {exc.strerror or exc}") from exc
    logger.info("Wrote SVG document to %s", output_path)


def _apply_overrides(config: ChartConfig, args: argparse.Namespace) -> ChartConfig:
    changes = {}
    if args.width is not None:
        changes["canvas_width"] = args.width
    if args.height is not None:
        changes["canvas_height"] = args.height
    if args.tick_count is not None:
        changes["tick_count_target"] = args.tick_count
    if args.font_family is not None:
        changes["font_family"] = args.font_family
    if args.font_size is not None:
        changes["font_size"] = args.font_size
    if args.legend is not None:
        changes["legend_position"] = args.legend
    return config.replace(**changes) if changes else config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stacked-bar-chart",
        description="Render a stacked bar chart from a JSON document into SVG",
    )
    parser.add_argument("input_file", nargs="?", help="The input file (default: stdin)")
    parser.add_argument("output_file", nargs="?", help="The output file (default: stdout)")
    parser.add_argument(
        "-n",
        "--no-color",
        action="store_true",
        default=_env_flag("NO_CLI_COLOR"),
        help="Disable colors in output (env: NO_CLI_COLOR)",
    )
    parser.add_argument("--width", type=float, help="Canvas width in pixels")
    parser.add_argument("--height", type=float, help="Canvas height in pixels")
    parser.add_argument("--tick-count", type=int, help="Target number of value-axis ticks")
    parser.add_argument("--font-family", help="CSS font-family for all text")
    parser.add_argument("--font-size", type=float, help="Base font size in pixels")
    parser.add_argument("--legend", choices=["right", "bottom"], help="Legend placement")
    parser.add_argument("--pretty", action="store_true", help="Indent the SVG output")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level, use_color=not args.no_color and sys.stderr.isatty())

    try:
        text = _read_input(args.input_file)
        parsed = parse_chart(text)
        config = _apply_overrides(parsed.config, args)
        validate(parsed.chart, config)
        logger.info(
            "Parsed %d categories with %d legend keys",
            len(parsed.chart.categories),
            len(parsed.chart.legend_keys),
        )
        result = render_chart(parsed.chart, config)
        for warning in result.warnings:
            logger.warning("%s", warning)
        _write_output(args.output_file, result.to_svg(pretty=args.pretty))
    except (OSError, ParseError, ChartError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1)


if __name__ == "__main__":
    main(sys.argv[1:])
