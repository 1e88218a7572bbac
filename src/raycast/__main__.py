import sys

from raycast.cli import main

sys.exit(main())
