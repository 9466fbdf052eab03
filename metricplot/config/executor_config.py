# metricplot/config/executor_config.py
from typing import Optional

from pydantic import BaseModel, Field


class ExecutorConfig(BaseModel):
    # None -> os.cpu_count()
    thread_count: Optional[int] = Field(default=None, ge=1)
    min_block_size: int = Field(default=1024, ge=1)
