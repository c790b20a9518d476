"""
Velero-UI Configuration using Pydantic Settings.

Provides strongly typed configuration with environment variable support,
validation, and sensible defaults.

Environment variables use VELERO_UI_ prefix:
- VELERO_UI_CMD_CREATE_BACKUP, VELERO_UI_CMD_DESCRIBE (command templates)
- VELERO_UI_WIZARD_POLL_INTERVAL, VELERO_UI_WIZARD_POLL_TIMEOUT (polling)
- VELERO_UI_LOG_LEVEL, VELERO_UI_LOG_DEBUG (log settings)
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


CONFIG_FILE = Path("config") / "config.yaml"

DEFAULT_RESOURCE_PREFIXES = [
    "pod/",
    "service/",
    "deployment.apps/",
    "replicaset.apps/",
    "statefulset.apps/",
    "daemonset.apps/",
    "job.batch/",
    "cronjob.batch/",
]


def get_project_root() -> Path:
    """Get the project root directory."""
    # Check for environment override
    if env_home := os.getenv("VELERO_UI_HOME"):
        return Path(env_home)

    # Default to current working directory
    return Path.cwd()


class CommandSettings(BaseSettings):
    """
    External command templates.

    Templates are formatted with str.format. Available fields depend on the
    step: {context}, {namespaces}, {name}, {backup}, {resources},
    {resource_types}, {kind}.

    Values are shell-quoted before substitution, so templates must not quote
    placeholders themselves. List fields are joined with commas, except
    {namespaces} in list_resources, which is space-separated.
    """

    model_config = SettingsConfigDict(
        env_prefix="VELERO_UI_CMD_",
        extra="ignore",
    )

    list_contexts: str = Field(
        default="kubectl config get-contexts -o name",
        description="Lists kube contexts, one per line"
    )
    list_namespaces: str = Field(
        default=(
            "kubectl get namespaces --context {context} "
            "-o custom-columns=NAME:.metadata.name --no-headers"
        ),
        description="Lists namespaces of the chosen context, one per line"
    )
    list_backups: str = Field(
        default="velero backup get -o json",
        description="Lists existing backups"
    )
    backup_list_format: str = Field(
        default="json",
        description="Output format of list_backups (json, lines)"
    )
    backup_name_field: str = Field(
        default="metadata.name",
        description="Dotted path of the name field in structured backup output"
    )
    list_resources: str = Field(
        default=(
            'for ns in {namespaces}; do '
            'kubectl get all --context {context} -n "$ns" --no-headers; done'
        ),
        description="Lists resources of the space-separated namespaces"
    )
    create_backup: str = Field(
        default=(
            "velero backup create {name} --include-namespaces {namespaces} "
            "--kubecontext {context}"
        ),
        description="Creates a backup of whole namespaces"
    )
    create_backup_with_resources: str = Field(
        default=(
            "velero backup create {name} --include-namespaces {namespaces} "
            "--include-resources {resource_types} --kubecontext {context}"
        ),
        description="Creates a backup limited to the selected resource types"
    )
    create_restore: str = Field(
        default=(
            "velero restore create {backup} --from-backup {backup} "
            "--include-namespaces {namespaces} --kubecontext {context}"
        ),
        description="Creates a restore named after its source backup"
    )
    create_restore_with_resources: str = Field(
        default=(
            "velero restore create {backup} --from-backup {backup} "
            "--include-namespaces {namespaces} "
            "--include-resources {resource_types} --kubecontext {context}"
        ),
        description="Creates a restore limited to the selected resource types"
    )
    describe: str = Field(
        default="velero {kind} describe {name} --details -o json --kubecontext {context}",
        description="Reports the status of a backup or restore"
    )

    @field_validator('backup_list_format')
    @classmethod
    def validate_backup_list_format(cls, v: str) -> str:
        """Validate backup list format."""
        v_lower = v.lower()
        if v_lower not in {"json", "lines"}:
            raise ValueError(f"Invalid backup list format: {v}. Must be 'json' or 'lines'")
        return v_lower


class WizardSettings(BaseSettings):
    """Wizard flow and polling settings."""

    model_config = SettingsConfigDict(
        env_prefix="VELERO_UI_WIZARD_",
        validate_assignment=True,
        extra="ignore",
    )

    poll_interval: float = Field(
        default=5.0,
        gt=0,
        description="Seconds between status queries"
    )
    poll_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Give up polling after this many seconds (unbounded if unset)"
    )
    resource_selection: bool = Field(
        default=True,
        description="Offer selecting specific resources after namespaces"
    )
    resource_prefixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RESOURCE_PREFIXES),
        description="Resource type prefixes offered for selection"
    )
    shell: str = Field(
        default="/bin/sh",
        description="Shell used to run external commands"
    )


class LogSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="VELERO_UI_LOG_",
        extra="ignore",
    )

    level: str = Field(
        default="WARNING",
        description="Log level"
    )
    format: str = Field(
        default="console",
        description="Log format (json, console)"
    )
    file: Optional[str] = Field(
        default=None,
        description="Log file path"
    )
    debug: bool = Field(
        default=False,
        description="Capture a debug log and print it on exit"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @property
    def effective_level(self) -> str:
        return "DEBUG" if self.debug else self.level


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from:
    1. Environment variables (VELERO_UI_* prefix)
    2. YAML config file (config/config.yaml)
    3. Default values

    Environment variables take precedence.
    """

    model_config = SettingsConfigDict(
        env_prefix="VELERO_UI_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    commands: CommandSettings = Field(default_factory=CommandSettings)
    wizard: WizardSettings = Field(default_factory=WizardSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    @classmethod
    def load_from_yaml(cls, config_file: Path) -> "Settings":
        """Load settings from YAML file with environment overrides."""
        data = {}

        if config_file.exists():
            with open(config_file, 'r') as f:
                data = yaml.safe_load(f) or {}

        # Create nested settings from YAML data
        settings_dict = {}

        if 'commands' in data:
            settings_dict['commands'] = CommandSettings(**data['commands'])
        if 'wizard' in data:
            settings_dict['wizard'] = WizardSettings(**data['wizard'])
        if 'log' in data:
            settings_dict['log'] = LogSettings(**data['log'])

        return cls(**settings_dict)

    def save_to_yaml(self, config_file: Path) -> None:
        """Save settings to YAML file."""
        config_file.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'commands': self.commands.model_dump(),
            'wizard': self.wizard.model_dump(),
            'log': self.log.model_dump(),
        }

        with open(config_file, 'w') as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def default_config_path() -> Path:
    """Path of the configuration file under the project root."""
    return get_project_root() / CONFIG_FILE


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached singleton).

    First attempts to load from config/config.yaml, then applies
    environment variable overrides.
    """
    config_file = default_config_path()

    if config_file.exists():
        return Settings.load_from_yaml(config_file)

    return Settings()
