import sys

from tgptbot.cli import main

if __name__ == "__main__":
    sys.exit(main())
