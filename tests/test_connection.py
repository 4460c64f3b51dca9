import TestZoomConnection
from TestZoomConnection import main

USER = {
    "email": "admin@example.com",
    "first_name": "Ada",
    "last_name": "Lovelace",
    "type": 2,
    "status": "active",
}


def test_main_reports_missing_variables(monkeypatch, capsys):
    monkeypatch.setattr(TestZoomConnection, "load_dotenv", lambda: None)
    monkeypatch.delenv("ACCOUNT_ID")
    monkeypatch.delenv("CLIENT_ID")

    assert main() == 1

    err = capsys.readouterr().err
    assert "- ACCOUNT_ID" in err
    assert "- CLIENT_ID" in err
    assert "CLIENT_SECRET" not in err


def test_main_succeeds(monkeypatch, capsys):
    monkeypatch.setattr(TestZoomConnection, "load_dotenv", lambda: None)
    monkeypatch.setattr(TestZoomConnection, "get_access_token", lambda config: "tok")
    monkeypatch.setattr(TestZoomConnection, "get_current_user", lambda token: USER)

    assert main() == 0

    out = capsys.readouterr().out
    assert "Account ID : account-..." in out
    assert "Email : admin@example.com" in out
    assert "Name : Ada Lovelace" in out


def test_main_fails_on_bad_credentials(monkeypatch, http_error, capsys):
    def bad_token(config):
        raise http_error(400, {"reason": "Invalid client_id or client_secret", "error": "invalid_client"})

    monkeypatch.setattr(TestZoomConnection, "load_dotenv", lambda: None)
    monkeypatch.setattr(TestZoomConnection, "get_access_token", bad_token)

    assert main() == 1
    assert "Authentication failed" in capsys.readouterr().err


def test_main_fails_when_user_lookup_fails(monkeypatch, http_error, capsys):
    def forbidden(token):
        raise http_error(403, {"code": 4711, "message": "Invalid access token, does not contain scopes."})

    monkeypatch.setattr(TestZoomConnection, "load_dotenv", lambda: None)
    monkeypatch.setattr(TestZoomConnection, "get_access_token", lambda config: "tok")
    monkeypatch.setattr(TestZoomConnection, "get_current_user", forbidden)

    assert main() == 1
    assert "does not contain scopes" in capsys.readouterr().err
