"""Tests for configuration loading and sandboxing."""

from stream_interceptor.config import InterceptorConfig, get_config_path, load_config


class TestInterceptorConfig:
    def test_defaults(self):
        c = InterceptorConfig()
        assert c.fallback_enabled is True
        assert c.open_command == "openspace.editor.open"
        assert c.run_command == "openspace.terminal.execute"
        assert c.command_prefix == "openspace."
        assert c.chunk_size is None

    def test_custom_settings(self):
        c = InterceptorConfig()
        c.set("my_key", "my_value")
        assert c.get("my_key") == "my_value"
        assert c.get("missing", "default") == "default"


class TestConfigPath:
    def test_xdg_config_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_path() == tmp_path / "stream-interceptor"

    def test_default_path(self, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert get_config_path().parts[-2:] == (".config", "stream-interceptor")


class TestLoadConfig:
    def test_no_config_file(self, no_user_config):
        """When no init.py exists, should return defaults with no error."""
        config, error = load_config()
        assert error is None
        assert config.fallback_enabled is True

    def test_valid_config(self, no_user_config):
        no_user_config.write_text(
            'config.fallback_enabled = False\n'
            'config.open_command = "ide.open"\n'
            'config.chunk_size = 16\n'
        )
        config, error = load_config()
        assert error is None
        assert config.fallback_enabled is False
        assert config.open_command == "ide.open"
        assert config.chunk_size == 16

    def test_sandbox_blocks_import(self, no_user_config):
        """The sandbox should prevent __import__ calls."""
        no_user_config.write_text("import os\n")
        config, error = load_config()
        assert error is not None
        assert "Error" in error

    def test_sandbox_blocks_open(self, no_user_config):
        no_user_config.write_text("f = open('/etc/passwd')\n")
        config, error = load_config()
        assert error is not None

    def test_sandbox_blocks_eval(self, no_user_config):
        no_user_config.write_text("eval('1+1')\n")
        config, error = load_config()
        assert error is not None

    def test_sandbox_allows_basic_types(self, no_user_config):
        """Basic Python types should work in the sandbox."""
        no_user_config.write_text(
            'x = str(42)\n'
            'y = list(range(3))\n'
            'config.set("x", x)\n'
            'config.set("y", y)\n'
        )
        config, error = load_config()
        assert error is None
        assert config.get("x") == "42"
        assert config.get("y") == [0, 1, 2]

    def test_error_keeps_settings_made_before_failure(self, no_user_config):
        no_user_config.write_text('config.run_command = "ide.run"\nint("boom")\n')
        config, error = load_config()
        assert "boom" in error
        assert config.run_command == "ide.run"
