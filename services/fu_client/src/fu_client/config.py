from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FU_", env_file=None, extra="ignore")

    addr: str = ""
    token: str = ""
    timeout: float = 90.0


settings = ClientSettings()
