import sys

from callsynth.cli import main

sys.exit(main())
