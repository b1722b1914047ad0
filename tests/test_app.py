"""Tests for the app factory."""

import os
import unittest
from unittest.mock import patch

# Pre-emptive imports to ensure patch targets exist.
from sweepstake import create_app


class AppFirebaseTestCase(unittest.TestCase):
    """Test case for the app factory."""

    @patch("firebase_admin.initialize_app")
    @patch("firebase_admin.firestore.client")
    def test_404_error_handler(self, mock_firestore_client, mock_init_app):
        """Test the custom 404 error handler."""
        app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": False})

        with app.test_client() as client:
            response = client.get("/non_existent_page")
            self.assertEqual(response.status_code, 404)
            self.assertEqual(
                response.get_json(),
                {"error": "not_found", "message": "Page Not Found"},
            )
        mock_init_app.assert_not_called()

    def test_config_from_environment(self):
        """Test that keys and the CSRF switch are read from the environment."""
        env_vars = {
            "SECRET_KEY": "s3cret",
            "ADMIN_KEY": "admin",
            "WTF_CSRF_ENABLED": "false",
        }

        with patch.dict(os.environ, env_vars):
            app = create_app({"TESTING": True})

        self.assertEqual(app.config["SECRET_KEY"], "s3cret")
        self.assertEqual(app.config["ADMIN_KEY"], "admin")
        self.assertFalse(app.config["WTF_CSRF_ENABLED"])

    def test_test_config_overrides_environment(self):
        """Test that explicit config wins over the environment."""
        with patch.dict(os.environ, {"ADMIN_KEY": "admin"}):
            app = create_app({"TESTING": True, "ADMIN_KEY": "other"})
        self.assertEqual(app.config["ADMIN_KEY"], "other")

    @patch("firebase_admin.firestore.client")
    def test_csrf_enforced_on_json_posts(self, mock_firestore_client):
        """Test that state-changing requests need the token when CSRF is on."""
        app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": True})

        with app.test_client() as client:
            response = client.post(
                "/competitions/magnum2025/draft",
                json={"match_id": "1", "winner": "Lions"},
            )
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.get_json()["error"], "csrf_error")

            token = client.get("/csrf-token").get_json()["csrfToken"]
            self.assertTrue(token)

    @patch("sweepstake.credentials.ApplicationDefault")
    @patch("firebase_admin.initialize_app")
    def test_firebase_initialised_outside_testing(self, mock_init_app, mock_default):
        """Test that Firebase falls back to application default credentials."""
        with patch.dict(
            os.environ,
            {"FIREBASE_CREDENTIALS_JSON": "", "FIREBASE_PROJECT_ID": "demo-project"},
        ), patch("firebase_admin._apps", {}):
            create_app({"TESTING": False})

        mock_init_app.assert_called_once_with(
            mock_default.return_value, {"projectId": "demo-project"}
        )


if __name__ == "__main__":
    unittest.main()
