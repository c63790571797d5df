"""Address derivation, proxy bytecode, salt guards and deployment."""
