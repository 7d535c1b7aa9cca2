import sys

from config_guardian.cli import main

if __name__ == "__main__":
    sys.exit(main())
