"""Keep tracker data files out of the working tree during tests."""

import os
import tempfile

os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="combat-tracker-tests-"))
