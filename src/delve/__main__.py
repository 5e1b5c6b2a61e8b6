"""Allow running as python -m delve."""

from .cli import main

if __name__ == "__main__":
    main()
