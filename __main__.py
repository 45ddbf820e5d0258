#!/usr/bin/env python3
import sys

import cli

if __name__ == '__main__':
    sys.exit(cli.main())
