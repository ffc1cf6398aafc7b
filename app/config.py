# app/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple
from urllib.parse import urlsplit

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    # Server
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))
    environment: str = os.getenv("APP_ENV", os.getenv("NODE_ENV", "development"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Public URLs
    backend_url: str = os.getenv("BACKEND_URL", "")
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Storage
    data_dir: Path = Path(os.getenv("DATA_DIR", "data"))
    uploads_dir: Path = Path(os.getenv("UPLOADS_DIR", "uploads"))
    snapshot_name: str = os.getenv("SNAPSHOT_NAME", "menuItems.json")
    max_upload_bytes: int = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def public_hosts(self) -> Tuple[str, ...]:
        """Hosts under which this process serves its own uploads."""
        hosts = [f"localhost:{self.port}", f"127.0.0.1:{self.port}"]
        if self.backend_url:
            hosts.append(urlsplit(self.backend_url).netloc)
        return tuple(h for h in hosts if h)

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / self.snapshot_name


settings = Settings()
