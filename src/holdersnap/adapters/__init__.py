"""Adapters for RPC endpoints, block lookup, Solana indexing and CSV output."""
