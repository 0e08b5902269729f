# run_converter.py
import sys

from wbox_mapgen.cli import main

if __name__ == "__main__":
    sys.exit(main())
