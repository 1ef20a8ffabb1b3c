import sys

from gitcredazure.cli import main

sys.exit(main())
