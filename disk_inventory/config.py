"""
Configuration constants for the disk inventory.
"""

# --- Enumeration & Batching ---
# Upper bound on rows per insert/update transaction (and per worker read)
BATCH_MAX_SIZE = 300

# --- Hashing & Performance ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- Record Formatting ---
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# --- Integrity ---
# Fixed salt mixed into every hashed cell. A constant, not a per-run nonce:
# identical inventories always produce identical signatures.
CHALLENGE = "510D5B0B6245A77B40B52C60DF3E0F85480D323C184B3BF6673044E249E12B3F"

# --- Store ---
DB_SUFFIX = ".sqlite"
# Seconds a connection waits on a locked database before giving up.
# Workers write through independent connections, so they queue on the lock.
DB_TIMEOUT = 60.0
LOG_FILE_NAME = "inventory.log"
