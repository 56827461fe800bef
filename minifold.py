"""Entry point for running minifold as a script."""

from minifold.cli import main


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
