"""Pytest configuration for root-level integration tests.

Adds the service src directory, the services root and scripts/ to sys.path for
cross-module imports.
"""

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SERVICES_ROOT = REPO_ROOT / "services"

SERVICE_PATHS = [
    SERVICES_ROOT / "economics-service" / "src",
    SERVICES_ROOT,
    REPO_ROOT / "scripts",
]

for path in SERVICE_PATHS:
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)
