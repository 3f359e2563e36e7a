#!/usr/bin/env python3
"""
Run a script as ``python -m scripts <command> [args...]``.

Usage:
    python -m scripts                         # List commands
    python -m scripts verify_bab --help       # Verify a deployed BAB token
"""
import importlib
import sys

COMMANDS = {
    "verify_bab": "Verify a deployed BAB / BABUSD1 token on the block explorer",
}


def main():
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print("Usage: python -m scripts <command> [args...]")
        print("\nCommands:")
        for name, summary in COMMANDS.items():
            print(f"  {name:30} - {summary}")
        sys.exit(0)

    command = sys.argv[1]
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print("Run 'python -m scripts' for the list of commands.")
        sys.exit(1)

    # The command parses argv itself
    sys.argv = [f"scripts.{command}"] + sys.argv[2:]
    module = importlib.import_module(f"scripts.{command}")
    sys.exit(module.main())


if __name__ == "__main__":
    main()
