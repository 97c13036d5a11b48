import sys

from .merger import main

sys.exit(main())
