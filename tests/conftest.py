import os

# Quiet console logging and no log files while testing
os.environ.setdefault("ENVIRONMENT", "testing")
