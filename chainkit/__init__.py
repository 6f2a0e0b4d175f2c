"""Address codecs, transaction building, fee estimation and RPC helpers for several blockchains."""

__version__ = "0.1.0"