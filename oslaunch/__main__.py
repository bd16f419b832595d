"""Allow ``python -m oslaunch``."""

from oslaunch.cli import main

if __name__ == "__main__":
    main()
