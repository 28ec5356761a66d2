import sys

from relaychat.cli.serve import main

sys.exit(main())
