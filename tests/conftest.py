from __future__ import annotations

import sys
from pathlib import Path

# Make ``secp_explorer`` importable from a plain checkout without installing.
_REPO_ROOT = Path(__file__).resolve().parent.parent
if (_REPO_ROOT / "secp_explorer" / "__init__.py").exists():
    sys.path.insert(0, str(_REPO_ROOT))
