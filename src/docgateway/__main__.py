import sys

from docgateway.cli import main

sys.exit(main())
