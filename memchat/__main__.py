import sys

from memchat.cli import main

sys.exit(main())
