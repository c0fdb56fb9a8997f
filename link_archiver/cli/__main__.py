"""Allow ``python -m link_archiver.cli`` execution."""

import sys

from link_archiver.cli.archive import main

sys.exit(main())
