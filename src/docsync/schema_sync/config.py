"""Options for schema synchronization."""

from pydantic import Field
from pydantic_settings import BaseSettings


class SyncOptions(BaseSettings):
    """Tunable behaviour of a sync call."""

    drop_duplicated_columns: bool = Field(
        default=True,
        description="Also drop the duplicated column of a removed field",
    )

    model_config = {"env_prefix": "DOCSYNC_SYNC_", "case_sensitive": False}
