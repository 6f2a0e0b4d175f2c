"""Solana addresses, program-derived addresses, JSON-RPC helpers and an account-data client."""