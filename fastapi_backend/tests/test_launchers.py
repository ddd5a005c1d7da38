import pytest

import main as main_launcher
import run as run_launcher


@pytest.fixture
def uvicorn_calls(monkeypatch):
    calls = []
    fake_run = lambda app, **kwargs: calls.append((app, kwargs))
    monkeypatch.setattr(main_launcher.uvicorn, "run", fake_run)
    monkeypatch.setattr(run_launcher.uvicorn, "run", fake_run)
    return calls


@pytest.mark.parametrize("launcher", [main_launcher, run_launcher])
@pytest.mark.parametrize("value, reload", [("1", True), ("TRUE", True), ("yes", True), ("0", False), ("", False)])
def test_launchers_honour_uvicorn_reload(uvicorn_calls, monkeypatch, launcher, value, reload):
    monkeypatch.setenv("UVICORN_RELOAD", value)

    launcher.main()

    [(app, kwargs)] = uvicorn_calls
    assert app == "inventory_api.api.main:create_app"
    assert kwargs["factory"] is True
    assert kwargs["reload"] is reload
