import os

# Base paths
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))

# Default directory file - can be overridden by env var or manually changed here
VPK_PATH = os.environ.get("VPK_PATH", os.path.join(PROJECT_ROOT, "pak01_dir.vpk"))

# Check CRC-32 of extracted files ("1" enables)
VALIDATE_CRC = os.environ.get("VPK_VALIDATE_CRC", "0") == "1"
