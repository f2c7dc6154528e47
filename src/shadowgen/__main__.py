"""CLI entry point: run `shadowgen file.rs` or `python -m shadowgen file.rs`."""

import sys
from pathlib import Path


def main(argv=None) -> int:
    import argparse
    from .compiler.driver import ExpansionDriver
    from .utils.io_utils import read_source_file, write_output_file

    parser = argparse.ArgumentParser(
        prog="shadowgen",
        description="Expand a #[shadow_impl] impl block into its shadow-type counterpart.",
    )
    parser.add_argument("file", type=Path, help="Rust file holding a single impl block")
    parser.add_argument(
        "--args",
        default=None,
        help="marker arguments, e.g. 'transform_bounds(T)'; the file then holds the item without its marker",
    )
    parser.add_argument(
        "--check-method",
        action="store_true",
        help="check a single associated item the way #[shadow_method] would",
    )
    parser.add_argument("-o", "--output", type=Path, default=None, help="write the expansion here instead of stdout")
    args = parser.parse_args(argv)

    path = args.file.resolve()
    if not path.exists():
        sys.stderr.write(f"shadowgen: error: file not found: {path}\n")
        return 1
    if not path.is_file():
        sys.stderr.write(f"shadowgen: error: not a file: {path}\n")
        return 1

    try:
        source = read_source_file(path)
    except (OSError, UnicodeDecodeError) as e:
        sys.stderr.write(f"shadowgen: error: could not read file: {e}\n")
        return 1

    driver = ExpansionDriver()
    if args.check_method:
        result = driver.check_method_marker(source, str(args.file))
    elif args.args is not None:
        result = driver.expand(args.args, source, str(args.file))
    else:
        result = driver.expand_source(source, str(args.file))

    if not result.success:
        if result.ctx is not None and result.ctx.reporter.has_errors():
            sys.stderr.write(result.ctx.reporter.format_all_errors())
        else:
            sys.stderr.write("shadowgen: expansion failed\n")
        return 1

    if args.output is not None:
        write_output_file(args.output, result.output)
    else:
        sys.stdout.write(result.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
