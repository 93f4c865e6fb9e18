"""Application configuration via environment variables."""

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings

from zkcloud.models.enums import Blockchain, TaskPolicy


class Settings(BaseSettings):
    # Logging
    log_level: str = "info"
    json_logs: bool = False

    # Blob storage: snapshots and worker files live under data_dir
    data_dir: Path = Path("./data")
    cache_dir: Path = Path("./cache")

    # Restored at startup and flushed at shutdown when set
    snapshot_name: str | None = None

    # Base58 private key handed to workers by get_deployer()
    deployer: SecretStr | None = None

    # Worker factories, each "developer/repo=package.module:factory"
    workers: list[str] = []

    # Jobs
    job_timeout_seconds: float | None = Field(None, gt=0)
    default_chain: Blockchain = Blockchain.LOCAL

    # Tasks
    task_policy: TaskPolicy = TaskPolicy.RECURRING
    task_poll_interval: float = 60.0
    scheduler_enabled: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "ZKCLOUD_",
    }


settings = Settings()
