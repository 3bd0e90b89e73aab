import os
import tomllib
from pathlib import Path
from typing import Annotated

import tomlkit
from eth_typing import ChecksumAddress
from pydantic import BaseModel, PlainSerializer, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from alchemist_indexer.functions import get_checksum_address
from alchemist_indexer.logging import logger

CONFIG_DIR = Path(
    os.environ.get(
        "ALCHEMIST_INDEXER_CONFIG_DIR",
        Path.home() / ".config" / "alchemist_indexer",
    )
)
CONFIG_FILE = CONFIG_DIR / "config.toml"
DB_PATH = CONFIG_DIR / "alchemist_indexer.db"


class DatabaseSettings(BaseModel):
    # Serialize the path as a string representation of the absolute path
    path: Annotated[
        Path,
        PlainSerializer(lambda path: str(path.absolute()), return_type=str),
    ]


class Settings(BaseSettings):
    model_config = SettingsConfigDict()

    database: DatabaseSettings

    # Emitting contract address -> event dialect name
    contracts: dict[ChecksumAddress, str] = {}

    # Dialect used for events without a registered contract address
    default_dialect: str = "v3"

    @field_validator("contracts", mode="after")
    def validate_addresses(
        cls,  # noqa: N805
        contracts: dict[ChecksumAddress, str],
    ) -> dict[ChecksumAddress, str]:
        """
        Checksum the contract addresses and normalize the dialect names.
        """

        return {
            get_checksum_address(address): dialect.lower()
            for address, dialect in contracts.items()
        }


def load_config_from_file(config_path: Path) -> Settings:
    return Settings.model_validate(
        tomllib.loads(
            config_path.read_text(),
        ),
    )


def save_config_to_file(config: Settings) -> None:
    CONFIG_FILE.write_text(
        tomlkit.dumps(
            config.model_dump(),
        ),
    )


if not CONFIG_DIR.exists():
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    logger.info(f"Created a configuration directory at {CONFIG_DIR}.")

if CONFIG_FILE.exists():
    settings = load_config_from_file(CONFIG_FILE)
else:
    settings = Settings(
        database=DatabaseSettings(
            path=DB_PATH,
        ),
    )

    save_config_to_file(settings)
    logger.info(f"Created a configuration file at {CONFIG_FILE}.")
