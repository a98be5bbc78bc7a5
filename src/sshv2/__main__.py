"""Entry point for python -m sshv2."""

import sys


def main():
    from sshv2.cli import main as cli_main

    sys.exit(cli_main())


if __name__ == "__main__":
    main()
