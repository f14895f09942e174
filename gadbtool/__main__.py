import sys

from .gadbtool import main

sys.exit(main())
