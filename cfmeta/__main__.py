import sys

from cfmeta.cli import main

sys.exit(main())
