import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    dictionary_path: str = os.getenv("SYMDELETE_DICTIONARY_PATH", "words.txt")
    max_distance: int = int(os.getenv("SYMDELETE_MAX_DISTANCE", "2"))
    suggest_limit: int = int(os.getenv("SYMDELETE_SUGGEST_LIMIT", "0"))
    build_workers: int = int(os.getenv("SYMDELETE_BUILD_WORKERS", str(os.cpu_count() or 4)))
    build_chunk_size: int = int(os.getenv("SYMDELETE_BUILD_CHUNK_SIZE", "2000"))
    progress_interval: int = int(os.getenv("SYMDELETE_PROGRESS_INTERVAL", "10000"))
    log_level: str = os.getenv("SYMDELETE_LOG_LEVEL", "INFO").upper()


settings = Settings()
