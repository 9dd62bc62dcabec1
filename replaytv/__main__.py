"""Allow running as ``python -m replaytv``."""

from replaytv.cli import main

if __name__ == "__main__":
    main()
