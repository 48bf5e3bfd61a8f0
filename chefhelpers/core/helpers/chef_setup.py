"""
setupChef: materialise the workstation config knife reads.

The file layout and the config.rb grammar belong to the Chef client;
this helper only fills in the values.
"""

from __future__ import annotations

import logging

from chefhelpers.core.helpers.base import Helper, HelperContext, HelperName
from chefhelpers.core.models.inputs import ChefServerInputs

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.rb"
CLIENT_KEY_FILE = "client.pem"


def _ruby_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("#{", "\\#{")
    return f'"{escaped}"'


def render_config(inputs: ChefServerInputs, windows: bool = False) -> str:
    """Render config.rb for ``inputs``.

    Lines end in CRLF when ``windows`` is set.
    """
    lines = [
        "current_dir = File.dirname(__FILE__)",
        "log_level :info",
        "log_location STDOUT",
        f"node_name {_ruby_string(inputs.username)}",
        f'client_key "#{{current_dir}}/{CLIENT_KEY_FILE}"',
        f"chef_server_url {_ruby_string(inputs.target_url)}",
        f"ssl_verify_mode {':verify_peer' if inputs.ssl_verify else ':verify_none'}",
        f"verify_api_cert {'true' if inputs.ssl_verify else 'false'}",
    ]
    newline = "\r\n" if windows else "\n"
    return newline.join(lines) + newline


class SetupChef(Helper):
    """Create the config directory with config.rb and client.pem."""

    @property
    def name(self) -> HelperName:
        return HelperName.SETUP_CHEF

    def run(self, context: HelperContext) -> str:
        inputs = context.configuration.inputs.chef_server()
        configuration = context.configuration
        config_dir = configuration.paths.config_dir

        context.filesystem.make_dir(config_dir)

        config_path = configuration.join_path(config_dir, CONFIG_FILE)
        context.filesystem.write_text(
            config_path, render_config(inputs, windows=configuration.is_windows)
        )

        key_path = configuration.join_path(config_dir, CLIENT_KEY_FILE)
        context.filesystem.write_text(key_path, inputs.password)

        if not inputs.ssl_verify:
            logger.warning("SSL verification disabled for %s", inputs.target_url)
        logger.info("Wrote %s and %s", config_path, key_path)

        return f"Configured Chef server {inputs.target_url} for '{inputs.username}'"
