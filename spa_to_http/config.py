from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    address: str = "0.0.0.0"
    port: int = 8080

    directory: str = "/code"
    spa_mode: bool = True
    base_path: str = "/"

    cache_max_age: int = 604800
    ignore_cache_control_paths: str = ""

    gzip: bool = False
    threshold: int = 1024

    logger: bool = False
    log_pretty: bool = False
    trust_forwarded_headers: bool = False

    class Config:
        env_file = ".env"

    @property
    def no_cache_paths(self) -> List[str]:
        return [p.strip() for p in self.ignore_cache_control_paths.split(",") if p.strip()]

    @property
    def mount_path(self) -> str:
        return "/" + self.base_path.strip("/")


settings = Settings()
