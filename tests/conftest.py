import json
import logging
import subprocess

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's own TRACE_LEVEL / SFDX_COMMAND out of the tests."""
    for var in ("TRACE_LEVEL", "SFDX_COMMAND"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """CLI tests call configure_logging(); don't let the level leak."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


@pytest.fixture
def fake_sfdx(monkeypatch):
    """
    Replace subprocess.run inside sfconnect.org_detail.

    Call the fixture with the stdout (str or dict) the CLI should produce;
    every invocation is recorded in ``fake.calls``.
    """

    class FakeSfdx:
        def __init__(self):
            self.calls = []
            self.stdout = ""
            self.stderr = ""
            self.returncode = 0

        def __call__(self, stdout="", stderr="", returncode=0):
            self.stdout = json.dumps(stdout) if isinstance(stdout, dict) else stdout
            self.stderr = stderr
            self.returncode = returncode
            return self

        def run(self, cmd, **kwargs):
            self.calls.append((list(cmd), kwargs))
            return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, self.stderr)

    fake = FakeSfdx()
    monkeypatch.setattr("sfconnect.org_detail.subprocess.run", fake.run)
    return fake


@pytest.fixture
def ok_payload():
    return {
        "status": 0,
        "result": {
            "username": "dev@example.com",
            "id": "00D000000000001",
            "connectedStatus": "Connected",
            "accessToken": "00D000000000001!AQEAQFAKETOKEN",
            "instanceUrl": "https://example.my.salesforce.com",
            "clientId": "PlatformCLI",
            "alias": "dev",
        },
    }
