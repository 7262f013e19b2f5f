import sys

from vaultcli.cli import main

if __name__ == '__main__':
    sys.exit(main())
