from backend.auth.jwt_handler import decode_access_token
from backend.auth.token_verifier import Identity, verify_token
from backend.core import config
from backend.issue_token import main


def test_main_prints_token_for_user_id(capsys) -> None:
    exit_code = main(['5'])

    token = capsys.readouterr().out.strip()
    assert exit_code == 0
    assert verify_token({'x-auth-token': token}, config.get_jwt_secret()) == Identity(id=5)


def test_main_rejects_non_integer_arguments(capsys) -> None:
    assert main(['alice']) == 2
    assert 'must be integers' in capsys.readouterr().err


def test_main_requires_user_id(capsys) -> None:
    assert main([]) == 2
    assert 'Usage' in capsys.readouterr().err


def test_main_honours_zero_minute_expiry(capsys) -> None:
    assert main(['5', '0']) == 0

    token = capsys.readouterr().out.strip()
    payload = decode_access_token(token)
    assert payload['exp'] - payload['iat'] == 0
