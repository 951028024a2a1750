"""Application configuration.

Two layers are involved:

* :class:`Settings` holds service-level options read from environment
  variables (prefix ``SLACKRELAY_``) or a ``.env`` file.
* :class:`Config` holds the Slack credentials read from the JSON file at
  :attr:`Settings.config_path`.  It is loaded fresh for every request by
  :func:`load_config` and never cached.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings

from slackrelay.errors import ConfigError

logger = logging.getLogger(__name__)

#: Base URL of the Slack Web API; the endpoint name is appended verbatim.
SLACK_API_URL = "https://slack.com/api/"


class Settings(BaseSettings):
    """Global configuration loaded from environment / ``.env`` file.

    Attributes:
        config_path: Location of the JSON credentials file.
        api_base_url: Prefix every outbound endpoint is appended to.
        message_endpoint: Slack API method the webhook route posts to.
        call_timeout: Seconds to wait for Slack before giving up.
            ``None`` disables the timeout entirely.
        log_level: Python logging level name.
        host: Bind address for the Uvicorn server.
        port: Bind port for the Uvicorn server.
    """

    config_path: str = "config.json"
    api_base_url: str = SLACK_API_URL
    message_endpoint: str = "chat.postMessage"
    call_timeout: Optional[float] = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "SLACKRELAY_",
    }


def get_settings() -> Settings:
    """Return a cached :class:`Settings` instance.

    The instance is constructed once and reused for the lifetime of the
    process.
    """
    return _settings


_settings = Settings()


class Config(BaseModel):
    """Slack credentials read from the config file.

    The file is a JSON object of the form::

        {"SlackBotToken": "xoxb-...", "ChannelID": "C0123456"}

    Any additional keys are ignored.

    Attributes:
        bot_token: Bearer token sent with every outbound call.
        channel_id: Default destination channel for relayed messages.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    bot_token: str = Field(alias="SlackBotToken")
    channel_id: str = Field(alias="ChannelID")


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """Read and validate the credentials file.

    Args:
        path: File to read.  Defaults to :attr:`Settings.config_path`.

    Returns:
        An immutable :class:`Config`.

    Raises:
        ConfigError: If the file cannot be read, is not a JSON object, or
            lacks ``SlackBotToken`` / ``ChannelID``.
    """
    path = Path(path if path is not None else get_settings().config_path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Error reading {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")

    try:
        config = Config.model_validate(data)
    except ValidationError as exc:
        missing = ", ".join(str(err["loc"][0]) for err in exc.errors())
        raise ConfigError(f"Invalid or missing keys in {path}: {missing}") from exc

    logger.debug("Loaded Slack credentials from %s", path)
    return config
