import sys

from sdunit.cli.main import main

sys.exit(main())
