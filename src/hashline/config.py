"""Runtime configuration, read from ``HASHLINE_*`` environment variables."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hashline.models.anchor_models import TagPolicy
from hashline.utils.diff_window import DEFAULT_CONTEXT
from hashline.utils.truncation import DEFAULT_MAX_BYTES, DEFAULT_MAX_LINES

ENV_PREFIX = "HASHLINE_"
DEFAULT_MUTATION_TIMEOUT = 10.0


class HashlineConfig(BaseSettings):
    """Settings shared by the read and edit operations.

    Each field can be set through ``HASHLINE_<FIELD>``; keyword arguments
    take precedence over the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        env_ignore_empty=True,
    )

    tag_policy: TagPolicy = TagPolicy.MARK_ALL
    strict_ambiguity: bool = False  # Fail instead of warning on ambiguous anchors
    auto_cleanup: bool = True  # Strip pasted anchor prefixes and insert echoes
    context_radius: int = Field(default=DEFAULT_CONTEXT, ge=0)
    max_lines: int = Field(default=DEFAULT_MAX_LINES, ge=1)
    max_bytes: int = Field(default=DEFAULT_MAX_BYTES, ge=1)
    mutation_timeout: float = Field(default=DEFAULT_MUTATION_TIMEOUT, gt=0)
    executor: Literal["local", "subprocess"] = "local"
    log_level: str = "INFO"
    log_json: bool = False
