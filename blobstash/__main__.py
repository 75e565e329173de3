import sys

from blobstash.main import main

sys.exit(main())
