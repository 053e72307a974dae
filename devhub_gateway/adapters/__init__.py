"""
Adapters for external systems.

- near_rpc : JSON-RPC client for NEAR ``call_function`` view queries
"""

from __future__ import annotations

from .near_rpc import NearRpc, NearRpcConfig, NearRpcError

__all__ = ["NearRpc", "NearRpcConfig", "NearRpcError"]
