"""
Tests for the helpers: cookbook version, Habitat, Chef config, environments.
"""

import json
from pathlib import Path

import pytest

from chefhelpers.adapters.mock import (
    InMemoryEnvironment,
    InMemoryFilesystem,
    MockProcessRunner,
    RecordingReporter,
)
from chefhelpers.adapters.task import MappingInputSource
from chefhelpers.core.config.resolver import resolve_configuration
from chefhelpers.core.engine.dispatcher import HelperDispatcher
from chefhelpers.core.engine.recorder import CommandStack
from chefhelpers.core.errors import InvalidInputError, MalformedDocumentError
from chefhelpers.core.helpers.chef_setup import render_config
from chefhelpers.core.helpers.cookbook_version import patch_version
from chefhelpers.core.helpers.environment_version import pin_cookbook_version
from chefhelpers.core.helpers.habitat import key_file_names
from chefhelpers.core.models.inputs import ChefServerInputs

VERSION_REGEX = "version\\s+['\"]?.*['\"]?"


# ── setCookbookVersion ──────────────────────────────────────────────


class TestPatchVersion:
    def test_replaces_version(self):
        content, matched = patch_version("version   100.99.98", VERSION_REGEX, "1.2.3")
        assert matched
        assert content == "version '1.2.3'"

    def test_only_first_match(self):
        source = "version '1.0.0'\n# version 9.9.9\n"
        content, _ = patch_version(source, r"version\s+'[^']*'", "2.0.0")
        assert content == "version '2.0.0'\n# version 9.9.9\n"

    def test_surrounding_lines_kept(self):
        source = "name 'mycookbook'\nversion '0.1.0'\nchef_version '>= 16'\n"
        content, _ = patch_version(source, VERSION_REGEX, "0.2.0")
        assert content == "name 'mycookbook'\nversion '0.2.0'\nchef_version '>= 16'\n"

    def test_no_match_unchanged(self):
        content, matched = patch_version("name 'x'\n", VERSION_REGEX, "1.2.3")
        assert not matched
        assert content == "name 'x'\n"

    def test_replacement_is_literal(self):
        content, _ = patch_version("version 1", r"version\s+\d+", r"1.\1.\g<0>")
        assert content == r"version '1.\1.\g<0>'"

    def test_invalid_regex(self):
        with pytest.raises(InvalidInputError):
            patch_version("version 1", "version(", "1.2.3")


class TestSetCookbookVersion:
    def test_version_is_updated(self, make_dispatcher, reporter, tmp_root: Path):
        metadata = tmp_root / "metadata.rb"
        metadata.write_text("version   100.99.98")

        dispatcher = make_dispatcher({
            "helper": "setCookbookVersion",
            "cookbookVersionNumber": "1.2.3",
            "cookbookMetadataPath": str(metadata),
            "cookbookVersionRegex": VERSION_REGEX,
        })
        receipt = dispatcher.run()

        assert receipt.ok
        assert metadata.read_text() == "version '1.2.3'"
        assert dispatcher.command_stack == []
        assert not reporter.failed

    def test_running_twice_is_idempotent(self, make_dispatcher, tmp_root: Path):
        metadata = tmp_root / "metadata.rb"
        metadata.write_text("name 'x'\nversion   100.99.98\n")
        dispatcher = make_dispatcher({
            "helper": "setCookbookVersion",
            "cookbookVersionNumber": "1.2.3",
            "cookbookMetadataPath": str(metadata),
            "cookbookVersionRegex": VERSION_REGEX,
        })

        dispatcher.run()
        once = metadata.read_text()
        dispatcher.run()

        assert metadata.read_text() == once == "name 'x'\nversion '1.2.3'\n"

    def test_missing_metadata_file_fails(self, make_dispatcher, reporter, tmp_root: Path):
        metadata = tmp_root / "missing" / "metadata.rb"
        dispatcher = make_dispatcher({
            "helper": "setCookbookVersion",
            "cookbookVersionNumber": "1.2.3",
            "cookbookMetadataPath": str(metadata),
        })
        receipt = dispatcher.run()

        assert receipt.failed
        assert receipt.metadata["error_type"] == "MissingTargetFileError"
        assert reporter.failure_count == 1
        assert not metadata.exists()
        assert dispatcher.command_stack == []

    def test_no_metadata_path_fails(self, make_dispatcher, reporter):
        dispatcher = make_dispatcher({"helper": "setCookbookVersion"})
        receipt = dispatcher.run()

        assert receipt.failed
        assert reporter.failure_count == 1
        assert "cookbookMetadataPath" in reporter.failures[0]

    def test_invalid_regex_leaves_file(self, make_dispatcher, reporter, tmp_root: Path):
        metadata = tmp_root / "metadata.rb"
        metadata.write_text("version 1.0.0")
        dispatcher = make_dispatcher({
            "helper": "setCookbookVersion",
            "cookbookVersionNumber": "1.2.3",
            "cookbookMetadataPath": str(metadata),
            "cookbookVersionRegex": "version(",
        })
        receipt = dispatcher.run()

        assert receipt.failed
        assert reporter.failure_count == 1
        assert metadata.read_text() == "version 1.0.0"

    def test_non_utf8_metadata_reported(self, make_dispatcher, reporter, tmp_root: Path):
        metadata = tmp_root / "metadata.rb"
        metadata.write_bytes(b"version   1.0.0\n# caf\xe9\n")
        dispatcher = make_dispatcher({
            "helper": "setCookbookVersion",
            "cookbookVersionNumber": "1.2.3",
            "cookbookMetadataPath": str(metadata),
        })
        receipt = dispatcher.run()

        assert receipt.failed
        assert receipt.metadata["error_type"] == "InvalidInputError"
        assert reporter.failure_count == 1
        assert "not valid UTF-8" in reporter.failures[0]
        assert metadata.read_bytes() == b"version   1.0.0\n# caf\xe9\n"


# ── setupHabitat ────────────────────────────────────────────────────


HABITAT_INPUTS = {
    "helper": "setupHabitat",
    "habitatOrigin": "myorigin",
    "habitatOriginRevision": "202007221100",
    "habitatOriginPublicKey": "Hab public key",
    "habitatOriginSigningKey": "Hab signing key",
}


class TestSetupHabitat:
    def test_key_file_names(self):
        assert key_file_names("myorigin", "202007221100") == (
            "myorigin-202007221100.pub",
            "myorigin-202007221100.sig.key",
        )

    def test_writes_key_files(self, make_dispatcher, tmp_root: Path):
        receipt = make_dispatcher(HABITAT_INPUTS).run()
        assert receipt.ok

        public_key = tmp_root / "myorigin-202007221100.pub"
        signing_key = tmp_root / "myorigin-202007221100.sig.key"
        assert public_key.is_file()
        assert signing_key.is_file()
        assert public_key.read_text() == "Hab public key"
        assert signing_key.read_text() == "Hab signing key"

    def test_sets_environment(self, make_dispatcher, environment, tmp_root: Path):
        make_dispatcher(HABITAT_INPUTS).run()
        assert environment.get_variable("HAB_ORIGIN") == "myorigin"
        assert environment.get_variable("HAB_CACHE_KEY_PATH") == str(tmp_root)

    def test_no_commands(self, make_dispatcher, runner):
        dispatcher = make_dispatcher(HABITAT_INPUTS)
        dispatcher.run()
        assert dispatcher.command_stack == []
        assert runner.call_count == 0

    def test_write_failure_leaves_environment(self, make_dispatcher, environment, reporter, tmp_root: Path):
        # A directory where the signing key should go makes the write fail
        (tmp_root / "myorigin-202007221100.sig.key").mkdir()

        receipt = make_dispatcher(HABITAT_INPUTS).run()

        assert receipt.failed
        assert reporter.failure_count == 1
        assert environment.variables == {}

    def test_missing_inputs(self, make_dispatcher, environment, reporter, tmp_root: Path):
        receipt = make_dispatcher({"helper": "setupHabitat", "habitatOrigin": "myorigin"}).run()
        assert receipt.failed
        assert reporter.failure_count == 1
        assert list(tmp_root.iterdir()) == []
        assert environment.variables == {}


# ── setupChef ───────────────────────────────────────────────────────


CHEF_INPUTS = {
    "helper": "setupChef",
    "targetUrl": "https://automate.example.com/organizations/myorg",
    "username": "aperson",
    "password": "long client key",
    "sslVerify": "false",
}


class TestRenderConfig:
    def _inputs(self, ssl_verify: bool) -> ChefServerInputs:
        return ChefServerInputs(
            target_url="https://chef.example.com/organizations/myorg",
            username="aperson",
            password="key",
            ssl_verify=ssl_verify,
        )

    def test_values(self):
        config = render_config(self._inputs(True))
        assert 'node_name "aperson"' in config
        assert 'chef_server_url "https://chef.example.com/organizations/myorg"' in config
        assert 'client_key "#{current_dir}/client.pem"' in config
        assert "ssl_verify_mode :verify_peer" in config
        assert "verify_api_cert true" in config

    def test_ssl_disabled(self):
        config = render_config(self._inputs(False))
        assert "ssl_verify_mode :verify_none" in config
        assert "verify_api_cert false" in config

    def test_line_endings(self):
        unix = render_config(self._inputs(True))
        windows = render_config(self._inputs(True), windows=True)
        assert "\r\n" not in unix
        assert windows == unix.replace("\n", "\r\n")

    def test_quotes_escaped(self):
        inputs = ChefServerInputs(target_url="https://x", username='a"b', password="k")
        assert 'node_name "a\\"b"' in render_config(inputs)


class TestSetupChef:
    def test_creates_config_dir(self, make_dispatcher, home_dir: Path):
        dispatcher = make_dispatcher(CHEF_INPUTS)
        receipt = dispatcher.run()

        assert receipt.ok
        config_dir = Path(dispatcher.configuration.paths.config_dir)
        assert config_dir == home_dir / ".chef"
        assert config_dir.is_dir()

    def test_creates_config_file(self, make_dispatcher):
        dispatcher = make_dispatcher(CHEF_INPUTS)
        dispatcher.run()

        config = Path(dispatcher.configuration.paths.config_dir) / "config.rb"
        assert config.is_file()
        content = config.read_text()
        assert 'chef_server_url "https://automate.example.com/organizations/myorg"' in content
        assert "ssl_verify_mode :verify_none" in content

    def test_client_key_contents(self, make_dispatcher):
        dispatcher = make_dispatcher(CHEF_INPUTS)
        dispatcher.run()

        client_key = Path(dispatcher.configuration.paths.config_dir) / "client.pem"
        assert client_key.is_file()
        assert client_key.read_bytes() == b"long client key"

    def test_no_commands(self, make_dispatcher):
        dispatcher = make_dispatcher(CHEF_INPUTS)
        dispatcher.run()
        assert dispatcher.command_stack == []

    def test_existing_config_dir(self, make_dispatcher, home_dir: Path):
        (home_dir / ".chef").mkdir()
        receipt = make_dispatcher(CHEF_INPUTS).run()
        assert receipt.ok

    def test_missing_inputs(self, make_dispatcher, reporter, home_dir: Path):
        receipt = make_dispatcher({"helper": "setupChef", "username": "aperson"}).run()
        assert receipt.failed
        assert reporter.failure_count == 1
        assert not (home_dir / ".chef").exists()


# ── envCookbookVersion ──────────────────────────────────────────────


ENV_INPUTS = {
    "helper": "envCookbookVersion",
    "environmentName": "testing",
    "cookbookName": "mycookbook",
    "cookbookVersionNumber": "100.98.99",
}


class TestPinCookbookVersion:
    def test_empty_document(self):
        assert pin_cookbook_version("{}", "mycookbook", "1.0.0") == {
            "cookbook_versions": {"mycookbook": "1.0.0"}
        }

    def test_preserves_other_entries(self):
        raw = json.dumps({
            "name": "testing",
            "default_attributes": {"a": 1},
            "cookbook_versions": {"other": "= 2.0.0", "mycookbook": "= 0.1.0"},
        })
        document = pin_cookbook_version(raw, "mycookbook", "1.0.0")
        assert document["name"] == "testing"
        assert document["default_attributes"] == {"a": 1}
        assert document["cookbook_versions"] == {"other": "= 2.0.0", "mycookbook": "1.0.0"}

    def test_null_cookbook_versions(self):
        document = pin_cookbook_version('{"cookbook_versions": null}', "c", "1")
        assert document["cookbook_versions"] == {"c": "1"}

    @pytest.mark.parametrize("raw", ["not json", "[]", '"text"', '{"cookbook_versions": []}'])
    def test_malformed(self, raw):
        with pytest.raises(MalformedDocumentError):
            pin_cookbook_version(raw, "c", "1")


class TestEnvironmentCookbookVersion:
    def _env_file(self, dispatcher) -> Path:
        return Path(dispatcher.configuration.paths.tmp_dir) / "testing.json"

    def test_runs_two_commands(self, make_dispatcher, tmp_root: Path):
        (tmp_root / "testing.json").write_text("{}")
        dispatcher = make_dispatcher(ENV_INPUTS)
        receipt = dispatcher.run()

        assert receipt.ok
        assert len(dispatcher.command_stack) == 2

    def test_downloads_then_uploads(self, make_dispatcher, runner, tmp_root: Path):
        (tmp_root / "testing.json").write_text("{}")
        dispatcher = make_dispatcher(ENV_INPUTS)
        dispatcher.run()

        knife = dispatcher.configuration.paths.knife_executable
        env_file = self._env_file(dispatcher)
        assert dispatcher.command_stack == [
            f"{knife} environment show testing -F json > {env_file}",
            f"{knife} environment from file {env_file}",
        ]
        assert runner.call_log == dispatcher.command_stack

    def test_environment_file_updated(self, make_dispatcher, tmp_root: Path):
        (tmp_root / "testing.json").write_text("{}")
        dispatcher = make_dispatcher(ENV_INPUTS)
        dispatcher.run()

        contents = json.loads(self._env_file(dispatcher).read_text())
        assert len(contents["cookbook_versions"]) == 1
        assert contents["cookbook_versions"]["mycookbook"] == "100.98.99"

    def test_download_failure_stops(self, make_dispatcher, runner, reporter, tmp_root: Path):
        (tmp_root / "testing.json").write_text("{}")
        runner.set_failure("environment show", error="ERROR: 401 Unauthorized")
        dispatcher = make_dispatcher(ENV_INPUTS)
        receipt = dispatcher.run()

        assert receipt.failed
        assert receipt.metadata["error_type"] == "ExternalCommandError"
        assert len(dispatcher.command_stack) == 1
        assert reporter.failure_count == 1
        assert "401 Unauthorized" in reporter.failures[0]
        assert (tmp_root / "testing.json").read_text() == "{}"

    def test_malformed_document_skips_upload(self, make_dispatcher, reporter, tmp_root: Path):
        (tmp_root / "testing.json").write_text("<html>login</html>")
        dispatcher = make_dispatcher(ENV_INPUTS)
        receipt = dispatcher.run()

        assert receipt.failed
        assert receipt.metadata["error_type"] == "MalformedDocumentError"
        assert len(dispatcher.command_stack) == 1
        assert reporter.failure_count == 1
        assert (tmp_root / "testing.json").read_text() == "<html>login</html>"

    def test_non_utf8_document_skips_upload(self, make_dispatcher, reporter, tmp_root: Path):
        (tmp_root / "testing.json").write_bytes(b'{"description": "caf\xe9"}')
        dispatcher = make_dispatcher(ENV_INPUTS)
        receipt = dispatcher.run()

        assert receipt.failed
        assert receipt.metadata["error_type"] == "MalformedDocumentError"
        assert len(dispatcher.command_stack) == 1
        assert reporter.failure_count == 1
        assert (tmp_root / "testing.json").read_bytes() == b'{"description": "caf\xe9"}'

    def test_upload_failure_reported(self, make_dispatcher, runner, reporter, tmp_root: Path):
        (tmp_root / "testing.json").write_text("{}")
        runner.set_failure("environment from file")
        dispatcher = make_dispatcher(ENV_INPUTS)
        receipt = dispatcher.run()

        assert receipt.failed
        assert len(dispatcher.command_stack) == 2
        assert reporter.failure_count == 1


# ── Windows agents ──────────────────────────────────────────────────


WINDOWS_TMP = r"C:\agent\_temp"
WINDOWS_HOME = r"C:\Users\agent"
WINDOWS_KNIFE = r"C:\opscode\chef-workstation\bin\knife.bat"


class TestWindowsTarget:
    """Helpers resolved for a Windows agent, run against in-memory doubles."""

    def _dispatcher(self, inputs, filesystem, environment=None, runner=None, reporter=None):
        reporter = reporter or RecordingReporter()
        configuration = resolve_configuration(
            MappingInputSource(inputs), "win32", WINDOWS_TMP, reporter, home_dir=WINDOWS_HOME
        )
        return HelperDispatcher(
            configuration,
            runner=runner or MockProcessRunner(),
            filesystem=filesystem,
            environment=environment or InMemoryEnvironment(),
            reporter=reporter,
            recorder=CommandStack(),
        )

    def test_env_cookbook_version_commands(self):
        env_file = r"C:\agent\_temp\testing.json"
        fs = InMemoryFilesystem({env_file: "{}"})
        runner = MockProcessRunner()
        dispatcher = self._dispatcher(ENV_INPUTS, fs, runner=runner)
        receipt = dispatcher.run()

        assert receipt.ok
        assert dispatcher.command_stack == [
            f"{WINDOWS_KNIFE} environment show testing -F json > {env_file}",
            f"{WINDOWS_KNIFE} environment from file {env_file}",
        ]
        assert runner.call_log == dispatcher.command_stack
        assert json.loads(fs.files[env_file]) == {"cookbook_versions": {"mycookbook": "100.98.99"}}

    def test_habitat_key_paths(self):
        fs = InMemoryFilesystem()
        env = InMemoryEnvironment()
        receipt = self._dispatcher(HABITAT_INPUTS, fs, environment=env).run()

        assert receipt.ok
        assert fs.files == {
            r"C:\agent\_temp\myorigin-202007221100.pub": "Hab public key",
            r"C:\agent\_temp\myorigin-202007221100.sig.key": "Hab signing key",
        }
        assert env.variables == {"HAB_ORIGIN": "myorigin", "HAB_CACHE_KEY_PATH": WINDOWS_TMP}

    def test_chef_config_paths(self):
        fs = InMemoryFilesystem()
        receipt = self._dispatcher(CHEF_INPUTS, fs).run()

        assert receipt.ok
        assert r"C:\Users\agent\.chef" in fs.directories
        assert fs.files[r"C:\Users\agent\.chef\client.pem"] == CHEF_INPUTS["password"]
        assert "\r\n" in fs.files[r"C:\Users\agent\.chef\config.rb"]
