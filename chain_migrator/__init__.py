#!/usr/bin/env python3
"""
Resumable on-chain state migration tool
"""

__version__ = "0.1.0"

from chain_migrator.core.config import load_config
from chain_migrator.core.costs import CostAccumulator
from chain_migrator.core.executor import OperationResult, TransactionExecutor
from chain_migrator.core.ledger import LedgerStore, is_migrated
from chain_migrator.core.migrator import ChainStateMigrator, RunSummary
