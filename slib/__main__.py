import sys

from slib.cli import main

sys.exit(main())
