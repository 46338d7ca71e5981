"""Unit tests for Firebase configuration, initialization and token checks."""

import json
from unittest.mock import MagicMock, patch

import pytest
from firebase_admin import auth

from datachat.auth.config import FirebaseConfig
from datachat.auth.firebase import AuthError, _load_credentials, initialize_firebase, verify_id_token
from datachat.auth.popup import firebase_head_html

ENABLED = FirebaseConfig(
    credentials=None,
    api_key="web-api-key",
    auth_domain=None,
    project_id="enterprise-d",
)


class TestFirebaseConfig:
    """Tests for FirebaseConfig."""

    def test_disabled_without_api_key(self) -> None:
        config = FirebaseConfig(credentials=None, api_key=None, auth_domain=None, project_id="p")

        assert config.enabled is False

    def test_disabled_without_project(self) -> None:
        config = FirebaseConfig(credentials=None, api_key="k", auth_domain=None, project_id=None)

        assert config.enabled is False

    def test_enabled_with_key_and_project(self) -> None:
        assert ENABLED.enabled is True

    def test_web_config_defaults_auth_domain(self) -> None:
        assert ENABLED.web_config() == {
            "apiKey": "web-api-key",
            "authDomain": "enterprise-d.firebaseapp.com",
            "projectId": "enterprise-d",
        }

    def test_loads_from_environment(self) -> None:
        env = {
            "FIREBASE_API_KEY": "env-key",
            "FIREBASE_PROJECT_ID": "env-project",
            "FIREBASE_AUTH_DOMAIN": "login.example.com",
        }
        with patch.dict("os.environ", env):
            config = FirebaseConfig()

        assert config.enabled is True
        assert config.web_config()["authDomain"] == "login.example.com"

    def test_head_html_initializes_sdk_with_web_config(self) -> None:
        html = firebase_head_html(ENABLED)

        assert "firebase-auth-compat.js" in html
        assert f"firebase.initializeApp({json.dumps(ENABLED.web_config())})" in html


class TestVerifyIdToken:
    """Tests for verify_id_token."""

    @patch("datachat.auth.firebase.auth.verify_id_token")
    def test_valid_token_returns_profile(self, mock_verify: MagicMock) -> None:
        mock_verify.return_value = {
            "uid": "uid-data",
            "email": "data@enterprise.example",
            "name": "Data",
            "picture": "https://example.com/data.png",
        }

        user = verify_id_token("token-123")

        mock_verify.assert_called_once_with("token-123", app=None)
        assert user.uid == "uid-data"
        assert user.email == "data@enterprise.example"
        assert user.display_name == "Data"
        assert user.photo_url == "https://example.com/data.png"

    @patch("datachat.auth.firebase.auth.verify_id_token")
    def test_minimal_claims(self, mock_verify: MagicMock) -> None:
        mock_verify.return_value = {"uid": "anon"}

        user = verify_id_token("token")

        assert user.uid == "anon"
        assert user.email is None

    @pytest.mark.parametrize("token", ["", None])
    def test_missing_token_rejected(self, token: str | None) -> None:
        with pytest.raises(AuthError, match="ID token required"):
            verify_id_token(token)

    @patch("datachat.auth.firebase.auth.verify_id_token")
    def test_invalid_token_raises_auth_error(self, mock_verify: MagicMock) -> None:
        mock_verify.side_effect = auth.InvalidIdTokenError("Token has wrong audience")

        with pytest.raises(AuthError, match="Invalid ID token"):
            verify_id_token("forged")

    @patch("datachat.auth.firebase.auth.verify_id_token")
    def test_malformed_token_raises_auth_error(self, mock_verify: MagicMock) -> None:
        mock_verify.side_effect = ValueError("Illegal ID token provided")

        with pytest.raises(AuthError):
            verify_id_token("not-a-jwt")


class TestInitializeFirebase:
    """Tests for Firebase app initialization."""

    @patch("datachat.auth.firebase.firebase_admin.initialize_app")
    def test_disabled_config_skips_initialization(self, mock_init: MagicMock) -> None:
        config = FirebaseConfig(credentials=None, api_key=None, auth_domain=None, project_id=None)

        assert initialize_firebase(config) is None
        mock_init.assert_not_called()

    @patch("datachat.auth.firebase.firebase_admin.initialize_app")
    @patch("datachat.auth.firebase.firebase_admin.get_app")
    def test_existing_app_reused(self, mock_get: MagicMock, mock_init: MagicMock) -> None:
        existing = MagicMock()
        mock_get.return_value = existing

        assert initialize_firebase(ENABLED) is existing
        mock_init.assert_not_called()

    @patch("datachat.auth.firebase.credentials.Certificate")
    @patch("datachat.auth.firebase.firebase_admin.initialize_app")
    @patch("datachat.auth.firebase.firebase_admin.get_app", side_effect=ValueError("no app"))
    def test_inline_json_credentials(
        self, mock_get: MagicMock, mock_init: MagicMock, mock_certificate: MagicMock
    ) -> None:
        service_account = {"type": "service_account", "project_id": "enterprise-d"}
        config = ENABLED.model_copy(update={"credentials": json.dumps(service_account)})

        app = initialize_firebase(config)

        mock_certificate.assert_called_once_with(service_account)
        mock_init.assert_called_once_with(
            mock_certificate.return_value, {"projectId": "enterprise-d"}
        )
        assert app is mock_init.return_value


class TestLoadCredentials:
    """Tests for credential source selection."""

    @patch("datachat.auth.firebase.credentials.ApplicationDefault")
    def test_no_value_uses_application_default(self, mock_default: MagicMock) -> None:
        assert _load_credentials(None) is mock_default.return_value

    @patch("datachat.auth.firebase.credentials.Certificate")
    def test_file_path(self, mock_certificate: MagicMock, tmp_path) -> None:
        path = tmp_path / "service-account.json"
        path.write_text("{}")

        _load_credentials(str(path))

        mock_certificate.assert_called_once_with(str(path))

    def test_garbage_value_rejected(self) -> None:
        with pytest.raises(AuthError):
            _load_credentials("definitely not json or a path")
