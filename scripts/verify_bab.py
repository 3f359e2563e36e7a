#!/usr/bin/env python3
"""
Verify a deployed BAB or BABUSD1 token on the network's block explorer.

Usage:
    python -m scripts verify_bab --network bsc --variant BAB --address 0x... \\
        --name "BAB Token" --symbol BAB --token-uri ipfs://... \\
        --factory 0x... --creator 0x... --validator 0x...

Same options as the installed ``bab-verify`` command (see ``bab_deploy.cli``).
"""
import sys

from bab_deploy.cli import main

if __name__ == "__main__":
    sys.exit(main())
