"""Entry point for `python -m reqsnap_cli` and `reqsnap` console script."""

from __future__ import annotations

from reqsnap_cli.app import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
