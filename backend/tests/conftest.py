"""pytest configuration for the backend test-suite."""

import os

# Keep PBKDF2 cheap under test; read by core.config when it is first imported.
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "1000")
