from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FU_", env_file=None, extra="ignore")

    addr: str = "127.0.0.1:8080"
    token: str = ""
    db_path: str = "store.db"
    upload_dir: str = "uploads"
    max_upload_size: int = 32 << 20
    sweep_interval: float = 60.0
    name_attempts: int = 3
    log_level: str = "INFO"

    @property
    def db_url(self) -> str:
        # sqlite файл
        return f"sqlite:///{self.db_path}"

    def host_port(self) -> tuple[str, int]:
        host, sep, port = self.addr.rpartition(":")
        if not sep or not port.isdigit() or not 0 < int(port) < 65536:
            raise ConfigError("fu: addr must be a tcp network address for server mode")
        return host.strip("[]") or "0.0.0.0", int(port)


settings = Settings()
