import sys

from archive_manifest.cli import main

# Configuration comes from .env / ARCHIVE_* variables; flags are optional.
#   python generate_manifest.py                 scan ./Files → ./manifest.json
#   python generate_manifest.py --interactive   confirm each MP3 rename

if __name__ == "__main__":
    sys.exit(main())
