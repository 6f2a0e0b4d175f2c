"""Zcash network parameters, transparent addresses, fee estimation, wire format and transactions."""