"""Entrypoint for `python -m TexDecode`."""

from .cli import main

if __name__ == "__main__":
    main()
