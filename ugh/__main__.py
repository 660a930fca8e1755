import sys

from ugh.cli.main import main

sys.exit(main())
