from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

TEST_SECRET = "3440e0fa2eae0a28e5dc58d76793eb151c19acf7"


@pytest.fixture(scope="session")
def app():
    # Must be set before importing modules that read the settings.
    os.environ["TWISM_SECRET"] = TEST_SECRET
    os.environ["TWISM_MOUNT_PATH"] = "/twism"

    import importlib

    for module_name in ["config.settings", "api.twism_routes", "api.routes", "main"]:
        sys.modules.pop(module_name, None)

    main = importlib.import_module("main")
    return main.app


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
