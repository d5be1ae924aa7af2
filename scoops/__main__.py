import sys

from scoops.cli import main

sys.exit(main())
