# Ensure the project root (for tests.fixtures) and src/ (for 'dazeus') are on
# sys.path when running pytest from a checkout that has not been installed.
import sys
from pathlib import Path

ROOT = Path(__file__).parent.resolve()
for path in (ROOT, ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
