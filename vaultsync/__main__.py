import sys

from vaultsync.cli import main

sys.exit(main())
