import sys

from enumscan.compiler.cli import main

if __name__ == "__main__":
    sys.exit(main())
