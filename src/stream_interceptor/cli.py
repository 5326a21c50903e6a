import argparse
import json
import logging
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from stream_interceptor.config import load_config
from stream_interceptor.interceptor import StreamInterceptor
from stream_interceptor.models import CommandDescriptor
from stream_interceptor.validation import rejection_reason


def split_chunks(text: str, size: int | None) -> list[str]:
    """Cut *text* into chunks of *size* characters to simulate streaming."""
    if not size or size <= 0:
        return [text]
    return [text[i : i + size] for i in range(0, len(text), size)]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stream-interceptor",
        description="Extract %%OS command blocks from assistant output.",
    )
    parser.add_argument("file", nargs="?", default=None, help="Input file (default: stdin)")
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Feed the input in chunks of this many characters",
    )
    parser.add_argument("--json", action="store_true", help="Print a JSON document")
    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Disable the plain-text '%%%%OS open|run' grammar",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Check commands against the configured namespace",
    )
    parser.add_argument(
        "--logging", action="store_true", default=None, help="Enable logging"
    )
    return parser


def _render_table(
    console: Console, blocks: list[CommandDescriptor], reasons: list[str | None] | None
) -> None:
    table = Table(title=f"{len(blocks)} command(s)")
    table.add_column("#", justify="right")
    table.add_column("Command")
    table.add_column("Args")
    if reasons is not None:
        table.add_column("Status")
    for i, block in enumerate(blocks, 1):
        row = [str(i), escape(block.cmd), escape(json.dumps(block.args, ensure_ascii=False))]
        if reasons is not None:
            reason = reasons[i - 1]
            row.append("[green]ok[/green]" if reason is None else f"[red]{escape(reason)}[/red]")
        table.add_row(*row)
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the stream-interceptor command."""
    args = build_parser().parse_args(argv)
    console = Console()
    err_console = Console(stderr=True)

    config, config_error = load_config()
    if config_error:
        err_console.print(f"[yellow]Config error:[/yellow] {escape(config_error)}", highlight=False)

    # Command-line arguments override config
    if args.chunk_size is not None:
        config.chunk_size = args.chunk_size
    if args.no_fallback:
        config.fallback_enabled = False
    if args.logging:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            filename="stream_interceptor.log",
            filemode="a",  # append mode
        )
        logging.getLogger("stream_interceptor").setLevel(logging.DEBUG)

    try:
        if args.file:
            with open(args.file, "r", encoding="utf-8") as f:
                data = f.read()
        else:
            data = sys.stdin.read()
    except (OSError, UnicodeDecodeError) as e:
        err_console.print(f"[red]Cannot read input:[/red] {escape(str(e))}", highlight=False)
        return 2

    interceptor = StreamInterceptor(config)
    result = interceptor.process_chunks(split_chunks(data, config.chunk_size))
    text = result.text + interceptor.finish()

    reasons = None
    if args.validate:
        reasons = [rejection_reason(block, config.command_prefix) for block in result.blocks]

    if args.json:
        document = {
            "text": text,
            "commands": [block.to_dict() for block in result.blocks],
        }
        if reasons is not None:
            for command, reason in zip(document["commands"], reasons):
                command["valid"] = reason is None
                command["reason"] = reason
        sys.stdout.write(json.dumps(document, ensure_ascii=False, indent=2) + "\n")
    else:
        console.out(text, highlight=False)
        if result.blocks:
            _render_table(console, result.blocks, reasons)

    if reasons is not None and any(reason is not None for reason in reasons):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
