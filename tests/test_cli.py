from typer.testing import CliRunner

from alphaomega.cli import main as cli

runner = CliRunner()


class _Resp:
    status_code = 200
    headers = {"content-type": "application/json"}

    def __init__(self, body):
        self._body = body
        self.text = str(body)

    def json(self):
        return self._body


def test_add_normalises_outcome(monkeypatch):
    sent = {}

    def fake_post(url, json=None, headers=None):
        sent.update(url=url, json=json)
        return _Resp({"accepted": True})

    monkeypatch.setattr(cli.requests, "post", fake_post)
    res = runner.invoke(cli.app, ["add", "ω"])
    assert res.exit_code == 0
    assert sent["url"].endswith("/outcomes")
    assert sent["json"] == {"result": "omega"}


def test_add_rejects_unknown_outcome():
    res = runner.invoke(cli.app, ["add", "maybe"])
    assert res.exit_code != 0


def test_start_sends_region(monkeypatch):
    sent = {}

    def fake_post(url, json=None, headers=None):
        sent.update(url=url, json=json)
        return _Resp({"active": True})

    monkeypatch.setattr(cli.requests, "post", fake_post)
    res = runner.invoke(cli.app, ["start", "10", "20", "300", "120", "--sensitivity", "35"])
    assert res.exit_code == 0
    assert sent["json"] == {"region": {"x": 10.0, "y": 20.0, "width": 300.0, "height": 120.0}, "sensitivity": 35}
