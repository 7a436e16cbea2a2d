"""Allow ``python -m pwscaffold``."""

from pwscaffold.cli import main

if __name__ == "__main__":
    main()
