import sys

from fuzzydrive.cli import main

sys.exit(main())
