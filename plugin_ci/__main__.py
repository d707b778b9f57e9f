"""
Entry point for the `plugin-ci` command-line interface.

This module provides the main() entry point that delegates to the Click CLI.
"""

import sys


def main():
    """Main entry point for the plugin-ci CLI."""
    from .cli import cli
    from .core.exceptions import PluginCIException

    try:
        cli()
    except PluginCIException as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
