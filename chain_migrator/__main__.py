#!/usr/bin/env python3
"""
Main execution module for the chain state migration tool
"""

from chain_migrator.cli.commands import main

if __name__ == "__main__":
    main()
