from pydantic import Field
from pydantic_settings import BaseSettings

from infinitylist.core.controller import ConcurrencyPolicy


class Config(BaseSettings):
    """Controller configuration loaded from environment variables."""

    debug: bool = False
    initial_page: int = Field(0, ge=0)  # Page index the first fetch receives
    concurrency: ConcurrencyPolicy = ConcurrencyPolicy.IGNORE  # What load_more() does while a fetch is pending

    model_config = {
        "env_file": [".env"],
        "env_prefix": "INFINITYLIST_",
        "extra": "ignore",
    }
