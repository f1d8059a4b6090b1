"""
Pipeline services for running cipher chains.

This module implements the chain pipeline:
1. Builds one validated cipher per requested stage (factory)
2. Orders the chain for the requested mode (reversed for decryption)
3. Applies each stage, chunking Caesar stages over a worker pool
"""

from cipherchain.services.pipeline.executor import ChainResult, PipelineExecutor
from cipherchain.services.pipeline.orchestrator import ChainOrchestrator

__all__ = [
    "ChainResult",
    "ChainOrchestrator",
    "PipelineExecutor",
]
