# loopmix128/oracle/config.py
# Configuration for the oracle (LoopMix128 stream service)

# Network config
HOST = '127.0.0.1'
PORT = 5000

# Seed configuration:
# - SEED_MODE:
#     'fixed'  : use the integer in SEED (if SEED is None, falls back to deterministic constant)
#     'random' : use os.urandom at startup (non-deterministic each run)
#     'time'   : use current unix time as seed material (reproducible if the time is logged)
SEED_MODE = 'fixed'   # 'fixed' | 'random' | 'time'

# If SEED_MODE == 'fixed', use this SEED (any non-negative int).
SEED = 0x1234567890ABCDEF

# If SEED_MODE == 'time': 's' -> int(time.time()), 'ms' -> int(time.time() * 1000)
TIME_GRANULARITY = 's'  # 's' or 'ms'

# Streams served by the oracle, and how their states are derived.
STREAM_COUNT = 4
PARTITION_MODE = 'partitioned'  # 'partitioned' | 'independent'

# How many bits of each 64-bit word are revealed (1..64)
OUTPUT_BITS = 64
OUTPUT_SELECT = 'high'   # 'high' or 'low'

# Upper bound on n for /get_outputs
MAX_BATCH = 4096

# Logging level
LOG_LEVEL = 'INFO'
