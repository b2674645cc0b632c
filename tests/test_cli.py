import responses

from carwash.cli import main

GET_ME = "https://api.telegram.org/bottoken/getMe"


def _clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in ("TELEGRAM_BOT_TOKEN", "ADMIN_CHAT_ID", "ADMIN_IDS", "CHANNEL_ID"):
        monkeypatch.delenv(key, raising=False)


def test_missing_token_fails(monkeypatch, tmp_path):
    _clean_env(monkeypatch, tmp_path)
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        assert main(["--db-path", str(tmp_path / "b.db")]) == 1
        assert len(rsps.calls) == 0


def test_rejected_token_fails(monkeypatch, tmp_path):
    _clean_env(monkeypatch, tmp_path)
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "token")
    with responses.RequestsMock() as rsps:
        rsps.post(GET_ME, status=401, json={"ok": False, "error_code": 401, "description": "Unauthorized"})
        assert main(["--db-path", str(tmp_path / "b.db")]) == 1
        assert len(rsps.calls) == 1
    assert not (tmp_path / "b.db").exists()


def test_token_read_from_dotenv(monkeypatch, tmp_path):
    _clean_env(monkeypatch, tmp_path)
    (tmp_path / ".env").write_text("TELEGRAM_BOT_TOKEN=token\n", encoding="utf-8")
    with responses.RequestsMock() as rsps:
        rsps.post(GET_ME, status=401, json={"ok": False, "error_code": 401, "description": "Unauthorized"})
        assert main(["--db-path", str(tmp_path / "b.db")]) == 1
        assert rsps.calls[0].request.url == GET_ME