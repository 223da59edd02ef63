"""CLI for managing the API key file."""

import argparse
import json
import sys
from pathlib import Path

from shocker_hub.adapters.credentials import generate_keys, preview_key, read_keys, write_keys

DEFAULT_KEYS_FILE = "api-keys.txt"
DEFAULT_KEY_COUNT = 10


def print_usage_hint() -> None:
    print("\nUsage:")
    print("Include the apiKey in your POST request to /broadcast:")
    print("curl -X POST http://localhost:80/broadcast \\")
    print('  -H "Content-Type: application/json" \\')
    print(
        '  -d \'{"intensity": 50, "duration": 1000, "type": "shock", '
        '"apiKey": "YOUR_KEY_HERE"}\''
    )


def print_keys(keys: list[str], show_full: bool = True) -> None:
    print("=" * 80)
    for index, key in enumerate(keys, start=1):
        print(f"{index:>2}. {key if show_full else preview_key(key)}")
    print("=" * 80)


def generate_command(path: Path, count: int, force: bool, as_json: bool) -> None:
    """Write count fresh keys to path, refusing to replace existing keys without force."""
    if path.exists() and not force:
        try:
            existing = read_keys(path)
        except OSError as e:
            print(f"Cannot read {path}: {e}", file=sys.stderr)
            sys.exit(1)
        if existing:
            print(
                f"{path} already contains {len(existing)} key(s). Use --force to replace them.",
                file=sys.stderr,
            )
            sys.exit(1)

    keys = generate_keys(count)
    try:
        write_keys(path, keys)
    except OSError as e:
        print(f"Failed to write {path}: {e}", file=sys.stderr)
        sys.exit(1)

    if as_json:
        print(json.dumps({"file": str(path), "keys": keys}, indent=2))
        return

    print(f"Generated API keys file: {path}")
    print(f"Generated {len(keys)} API keys\n")
    print_keys(keys)
    print_usage_hint()


def list_command(path: Path, show_full: bool, as_json: bool) -> None:
    """Print the keys stored in path."""
    try:
        keys = read_keys(path)
    except FileNotFoundError:
        print(f"No API keys file at {path}. Run 'shocker-hub-keys generate'.", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        sys.exit(1)

    if as_json:
        entries = [
            {"id": index, "key": key, "preview": preview_key(key)}
            for index, key in enumerate(keys, start=1)
        ]
        print(json.dumps({"count": len(keys), "keys": entries}, indent=2))
        return

    print(f"{len(keys)} API key(s) in {path}:")
    print_keys(keys, show_full=show_full)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Shocker hub API key management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create api-keys.txt with 10 keys
  shocker-hub-keys generate

  # Replace an existing file with 3 keys
  shocker-hub-keys generate --count 3 --force

  # Show previews of stored keys
  shocker-hub-keys list
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    generate_parser = subparsers.add_parser("generate", help="Generate a new API key file")
    generate_parser.add_argument(
        "--count", type=int, default=DEFAULT_KEY_COUNT, help="Number of keys to generate"
    )
    generate_parser.add_argument("--file", default=DEFAULT_KEYS_FILE, help="Key file path")
    generate_parser.add_argument(
        "--force", action="store_true", help="Overwrite a file that already has keys"
    )
    generate_parser.add_argument("--json", action="store_true", help="Output as JSON")

    list_parser = subparsers.add_parser("list", help="List stored API keys")
    list_parser.add_argument("--file", default=DEFAULT_KEYS_FILE, help="Key file path")
    list_parser.add_argument(
        "--full", action="store_true", help="Show full keys instead of previews"
    )
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "generate":
        if args.count < 1:
            print("--count must be at least 1", file=sys.stderr)
            sys.exit(1)
        generate_command(Path(args.file), args.count, args.force, args.json)
    elif args.command == "list":
        list_command(Path(args.file), args.full, args.json)


if __name__ == "__main__":
    main()
