import sys

from vbcompetitions.cli import main

sys.exit(main())
