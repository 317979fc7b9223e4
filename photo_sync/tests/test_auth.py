from unittest.mock import patch, MagicMock

import pytest

from auth import authenticate
from errors import CredentialsError


class TestAuthenticate:
    def test_valid_cached_token(self, tmp_path):
        token_path = tmp_path / "token.json"
        token_path.write_text("{}")
        creds_path = tmp_path / "client_secret.json"

        mock_creds = MagicMock()
        mock_creds.valid = True

        with patch("auth.Credentials.from_authorized_user_file", return_value=mock_creds):
            result = authenticate(creds_path, token_path)

        assert result is mock_creds
        assert token_path.read_text() == "{}"

    def test_expired_token_refreshes(self, tmp_path):
        token_path = tmp_path / "token.json"
        token_path.write_text("{}")
        creds_path = tmp_path / "client_secret.json"

        mock_creds = MagicMock()
        mock_creds.valid = False
        mock_creds.expired = True
        mock_creds.refresh_token = "refresh_tok"
        mock_creds.to_json.return_value = '{"token": "new"}'

        with patch("auth.Credentials.from_authorized_user_file", return_value=mock_creds):
            result = authenticate(creds_path, token_path)

        mock_creds.refresh.assert_called_once()
        assert result is mock_creds
        assert token_path.read_text() == '{"token": "new"}'

    def test_missing_client_secret(self, tmp_path):
        with pytest.raises(CredentialsError, match="client_secret.json"):
            authenticate(tmp_path / "client_secret.json", tmp_path / "token.json")

    def test_new_auth_flow_when_no_token(self, tmp_path):
        token_path = tmp_path / "profile" / "token.json"
        creds_path = tmp_path / "client_secret.json"
        creds_path.write_text("{}")

        mock_creds = MagicMock()
        mock_creds.to_json.return_value = '{"token": "fresh"}'

        mock_flow = MagicMock()
        mock_flow.run_local_server.return_value = mock_creds

        with patch("auth.InstalledAppFlow.from_client_secrets_file",
                   return_value=mock_flow) as mock_from_file:
            result = authenticate(creds_path, token_path)

        mock_from_file.assert_called_once()
        assert mock_from_file.call_args.args[0] == str(creds_path)
        mock_flow.run_local_server.assert_called_once_with(port=0)
        assert result is mock_creds
        assert token_path.read_text() == '{"token": "fresh"}'
