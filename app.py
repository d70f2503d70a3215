import logging
import sys

from deploytree.cli import parse_args
from deploytree.copyops import run_deploy


def main(argv: list[str] | None = None):
    args = parse_args(sys.argv[1:] if argv is None else argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    code = run_deploy(
        source=args.source,
        output_dir=args.output,
        force=bool(args.force_overwrite),
        silent=bool(args.silent),
        extra_globs=args.extra_skip,
        follow_symlinks=args.follow_symlinks,
        max_depth=args.max_depth,
    )
    sys.exit(code)


if __name__ == "__main__":
    main()
