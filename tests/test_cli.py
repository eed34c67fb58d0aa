"""Tests for the Typer CLI, with the remote backend replaced by a fake."""
import pytest
from typer.testing import CliRunner

from whispi.api.models import UserChat
from whispi.cli.app import app
from whispi.streaming import CompleteFrame, ErrorFrame, FragmentFrame

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path, monkeypatch, fake_backend):
    """Point the CLI at a temporary session file and the fake backend."""
    monkeypatch.setenv("WHISPI_SESSION_BACKEND", "file")
    monkeypatch.setenv("WHISPI_SESSION_PATH", str(tmp_path / "session.json"))
    monkeypatch.setattr("whispi.cli.app.get_backend", lambda debug_callback=None: fake_backend)
    return fake_backend


class TestSessionCommands:
    """Tests for login and whoami."""

    def test_login_then_whoami(self, cli_env):
        result = runner.invoke(app, ["login", "user-42"])
        assert result.exit_code == 0
        assert "user-42" in result.output

        result = runner.invoke(app, ["whoami"])
        assert result.exit_code == 0
        assert "user-42" in result.output

    def test_blank_login_fails(self, cli_env):
        result = runner.invoke(app, ["login", "   "])
        assert result.exit_code == 1

    def test_commands_need_a_user(self, cli_env):
        result = runner.invoke(app, ["chats"])
        assert result.exit_code == 1
        assert "no user set" in result.output


class TestRemoteCommands:
    """Tests for commands that talk to the backend."""

    def test_chats_table(self, cli_env):
        cli_env.chats = [
            UserChat(character_id="luna", character_name="Luna", conversation_id="c1", last_message="Bye"),
        ]
        runner.invoke(app, ["login", "u1"])
        result = runner.invoke(app, ["chats"])
        assert result.exit_code == 0
        assert "Luna" in result.output
        assert cli_env.closed

    def test_characters_search(self, cli_env, sample_characters):
        cli_env.characters = sample_characters
        result = runner.invoke(app, ["characters", "--search", "gym"])
        assert result.exit_code == 0
        assert "Max" in result.output
        assert "Luna" not in result.output

    def test_characters_tag_filter(self, cli_env, sample_characters):
        cli_env.characters = sample_characters
        result = runner.invoke(app, ["characters", "--tag", "Fantasy"])
        assert result.exit_code == 0
        assert "Luna" in result.output
        assert "Ada" not in result.output

    def test_characters_lists_full_catalog(self, cli_env, sample_characters):
        cli_env.characters = sample_characters
        result = runner.invoke(app, ["characters"])
        assert result.exit_code == 0, result.output
        assert "4 of 4 characters" in result.output
        assert "Ghost" in result.output

    def test_send_streams_reply(self, cli_env):
        cli_env.reply_frames = [
            FragmentFrame(content="Hi"),
            FragmentFrame(content=" there"),
            CompleteFrame(content="Hi there!"),
        ]
        runner.invoke(app, ["login", "u1"])
        result = runner.invoke(app, ["send", "luna", "hello"])
        assert result.exit_code == 0
        assert "Hi there!" in result.output
        assert ("stream_reply", "hello", "luna", "u1") in cli_env.calls

    def test_send_error_frame_fails(self, cli_env):
        cli_env.reply_frames = [ErrorFrame(message="quota exceeded")]
        runner.invoke(app, ["login", "u1"])
        result = runner.invoke(app, ["send", "luna", "hello"])
        assert result.exit_code == 1
        assert "Error sending message: quota exceeded" in result.output
