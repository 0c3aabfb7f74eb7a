from typing import Literal

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from room_fit.utilities.utilities import Utilities


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_prefix='ROOM_FIT_', extra='ignore')

    # Drag snapping (inches)
    grid_size: float = Field(default=6.0, gt=0)
    snap_threshold: float = Field(default=2.0, ge=0)

    # View
    pixels_per_unit: float = Field(default=5.0, gt=0)
    projection: Literal['isometric', 'orthographic'] = 'isometric'
    wall_height: float = Field(default=96.0, gt=0)
    default_vertical_extent: float = Field(default=20.0, gt=0)

    # Editing
    duplicate_offset: float = 5.0
    occlusion_buffer: float = 10.0

    # Fallback layout when nothing (valid) is loaded: 10 x 12 ft
    default_room_width: float = Field(default=120.0, gt=0)
    default_room_height: float = Field(default=144.0, gt=0)

    log_level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR'] = 'WARNING'

    def __init__(self, **data) -> None:
        Utilities.ensure_env_file(env_path=Path('.env'), example_path=Path('.env.example'))
        super().__init__(**data)
