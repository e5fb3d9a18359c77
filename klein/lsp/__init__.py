"""Language Server Protocol client pieces: framing, document sync, capability flags, server registry and per-server actors."""