import sys

from jsonscan._cli import main

if __name__ == "__main__":
    sys.exit(main())
