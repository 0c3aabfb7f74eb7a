from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Strict schema contract: reject unknown keys, never mutate in place."""
    model_config = ConfigDict(extra="forbid", frozen=True)
