import json
import os
import sys

import pytest

# Ensure project root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


SITES = {
    "5jc4NXQ8I": {
        "id": "5jc4NXQ8I",
        "name": "UpdraftPlus",
        "path": "~/Local Sites/updraftplus",
        "domain": "updraftplus.local",
        "mysql": {"database": "local", "user": "root", "password": "root"},
        "services": {
            "php": {"name": "php", "version": "8.2.10", "type": "lightning", "ports": {"HTTP": [10005]}},
            "mysql": {"name": "mysql", "version": "8.0.16", "type": "lightning", "ports": {"MYSQL": [10006]}},
        },
    },
    "aB3dE5fG7": {
        "id": "aB3dE5fG7",
        "name": "sg",
        "path": "/Users/dev/Local Sites/sg",
        "domain": "sg.local",
        "mysql": {"database": "local", "user": "root", "password": "secret"},
    },
    "noDbSite1": {
        "id": "noDbSite1",
        "name": "Static Blog",
        "path": "/Users/dev/Local Sites/static-blog/",
        "domain": "",
    },
}


def make_entry_script(site_id: str, site_path: str) -> str:
    return "\n".join(
        [
            "#!/bin/bash",
            f"# Local site {site_id}",
            "export MYSQL_HOME=\"/Users/dev/Library/Application Support/Local/run/%s/conf/mysql\"" % site_id,
            f"cd \"{site_path}/app/public\"",
            "echo \"Launching shell: $SHELL ...\"",
            "exec $SHELL",
            "",
        ]
    )


@pytest.fixture
def local_dir(tmp_path):
    """A fake Local config directory with sites.json and ssh-entry scripts."""
    root = tmp_path / "Local"
    root.mkdir()
    (root / "sites.json").write_text(json.dumps(SITES), encoding="utf-8")
    entry_dir = root / "ssh-entry"
    entry_dir.mkdir()
    for site_id in ("5jc4NXQ8I", "aB3dE5fG7"):
        site = SITES[site_id]
        (entry_dir / f"{site_id}.sh").write_text(make_entry_script(site_id, site["path"]), encoding="utf-8")
    return root


class ScriptedInput:
    """Helper to feed deterministic answers into interactive prompts."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.prompts = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._responses:
            raise AssertionError(f"No scripted response left for prompt: {prompt}")
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def scripted_input():
    return ScriptedInput
