#!/usr/bin/env python3
from pipesh.shell import main

if __name__ == "__main__":
    main()
