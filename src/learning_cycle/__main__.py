import sys

from learning_cycle.cli import main

sys.exit(main())
