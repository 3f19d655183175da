"""
Semaphore CLI: scaffold Semaphore projects and inspect groups.

Creates new projects from the official Hardhat template and reads
group data (merkle tree, members, verified proofs) from the Semaphore
subgraph, falling back to the contract itself when the subgraph
cannot answer.
"""

import os

__version__ = "0.1.0"
__author__ = "Semaphore contributors"

SEMAPHORE_HOME = os.environ.get("SEMAPHORE_HOME", "~/.semaphore")
