from __future__ import annotations

import json

import httpx
import pytest

from wordstress import cli
from wordstress.loadgen import runner


def test_invalid_configuration_exits_with_status_1() -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["example.com", "--mode", "burst"])
    assert exc_info.value.code == 1


def test_burst_run_prints_json_report(monkeypatch, capsys) -> None:
    mock = httpx.MockTransport(lambda request: httpx.Response(200, content=b"hello"))
    real_run_test = runner.run_test

    async def run_against_mock(config, **kwargs):
        kwargs["transport"] = mock
        return await real_run_test(config, **kwargs)

    monkeypatch.setattr(cli, "run_test", run_against_mock)

    cli.main(["example.com", "--mode", "burst", "--burst-clients", "3", "--output", "json"])

    data = json.loads(capsys.readouterr().out)
    assert data["total_requests"] == 3
    assert data["data_transferred_bytes"] == 15
    assert data["status_codes"]["2xx"] == 3
