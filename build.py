#!/usr/bin/env python3
from mdfeed.cli import main

if __name__ == "__main__":
    main()
