import sys

from parceltrack.cli import main

sys.exit(main())
