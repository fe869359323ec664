"""Tests for registration, login and the CLI session."""

import pytest

from fintrack.cli.main import cli
from fintrack.domain.auth import SESSION_KEY, SESSION_USERNAME_KEY, AuthService
from fintrack.domain.errors import AuthenticationError, ConflictError, ValidationError


class TestAuthService:
    """Tests for AuthService."""

    def test_register_creates_user_and_logs_in(self, auth_service, temp_db):
        user = auth_service.register("lan", "lan@example.com", "secret1", "secret1")

        assert user.username == "lan"
        assert user.email == "lan@example.com"
        assert temp_db.get_setting(SESSION_KEY) == user.id
        assert auth_service.current_user() == user

    def test_register_rejects_password_mismatch(self, auth_service):
        with pytest.raises(ValidationError, match="Passwords do not match"):
            auth_service.register("lan", "lan@example.com", "secret1", "secret2")

    def test_register_rejects_bad_email(self, auth_service):
        with pytest.raises(ValidationError, match="Invalid email"):
            auth_service.register("lan", "not-an-email", "secret1")

    def test_register_requires_username_and_password(self, auth_service):
        with pytest.raises(ValidationError, match="Username is required"):
            auth_service.register("  ", "lan@example.com", "secret1")
        with pytest.raises(ValidationError, match="Password is required"):
            auth_service.register("lan", "lan@example.com", "")

    def test_register_duplicate_username(self, auth_service, sample_user):
        with pytest.raises(ConflictError, match="already taken"):
            auth_service.register("lan", "other@example.com", "pw")

    def test_login_with_username_or_email(self, auth_service, sample_user):
        auth_service.logout()
        assert auth_service.login("lan", "secret1").id == sample_user.id

        auth_service.logout()
        assert auth_service.login("LAN@example.com", "secret1").id == sample_user.id

    def test_login_wrong_password(self, auth_service, sample_user):
        with pytest.raises(AuthenticationError, match="Invalid username or password"):
            auth_service.login("lan", "wrong")

    def test_login_unknown_user(self, auth_service):
        with pytest.raises(AuthenticationError, match="Invalid username or password"):
            auth_service.login("nobody", "secret1")

    def test_logout_clears_session(self, auth_service, sample_user):
        auth_service.logout()
        assert auth_service.current_user() is None
        with pytest.raises(AuthenticationError, match="Not logged in"):
            auth_service.require_user()

    def test_stale_session_is_cleared(self, temp_db, auth_service, sample_user):
        temp_db.delete_user(sample_user.id)

        assert auth_service.current_user() is None
        assert temp_db.get_setting(SESSION_KEY) is None

    def test_session_requires_matching_username(self, temp_db, auth_service, sample_user):
        temp_db.set_setting(SESSION_USERNAME_KEY, "binh")

        assert auth_service.current_user() is None
        assert temp_db.get_setting(SESSION_KEY) is None
        assert temp_db.get_setting(SESSION_USERNAME_KEY) is None

    def test_errors_are_value_errors(self, auth_service):
        """CLI code catches ValueError, so domain errors must be ValueErrors."""
        with pytest.raises(ValueError):
            auth_service.login("nobody", "x")


class TestAuthCommands:
    """Tests for register/login/logout/whoami commands."""

    def test_register_command(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "register",
                "--username",
                "minh",
                "--email",
                "minh@example.com",
                "--password",
                "pw123",
                "--confirm-password",
                "pw123",
            ],
        )

        assert result.exit_code == 0
        assert "Registered user 'minh'" in result.output
        assert "Welcome, minh" in result.output
        assert temp_db.get_user_by_username("minh") is not None

    def test_register_password_mismatch(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "register",
                "--username",
                "minh",
                "--email",
                "minh@example.com",
                "--password",
                "pw123",
                "--confirm-password",
                "pw124",
            ],
        )

        assert result.exit_code == 1
        assert "Passwords do not match" in result.output
        assert temp_db.get_user_by_username("minh") is None

    def test_login_prompts_for_password(self, cli_runner, temp_db, sample_user):
        AuthService(temp_db).logout()

        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "login", "--username", "lan"],
            input="secret1\n",
        )

        assert result.exit_code == 0
        assert "Welcome, lan" in result.output
        assert temp_db.get_setting(SESSION_KEY) == sample_user.id

    def test_login_failure(self, cli_runner, temp_db, sample_user):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "login", "--username", "lan", "--password", "bad"],
        )

        assert result.exit_code == 1
        assert "Error: Invalid username or password" in result.output

    def test_login_in_vietnamese(self, cli_runner, temp_db, sample_user):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "--lang",
                "vi",
                "login",
                "--username",
                "lan",
                "--password",
                "secret1",
            ],
        )

        assert result.exit_code == 0
        assert "Chào mừng, lan" in result.output

    def test_whoami_and_logout(self, cli_runner, temp_db, sample_user):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "whoami"])
        assert result.exit_code == 0
        assert "lan <lan@example.com>" in result.output

        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "logout"])
        assert result.exit_code == 0
        assert "Logout" in result.output

        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "whoami"])
        assert "Not logged in." in result.output

    def test_commands_require_login(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "transaction", "list"]
        )

        assert result.exit_code == 1
        assert "Not logged in" in result.output
