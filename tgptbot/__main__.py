import sys

from tgptbot.cli import main

sys.exit(main())
