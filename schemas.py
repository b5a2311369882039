"""
Schemas for the weekly task store.

UserSchedule mirrors a document in the "users" MongoDB collection. Day keys
are the strings "1".."7" (1 = Sunday ... 7 = Saturday).
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional

MIN_DAY = 1
MAX_DAY = 7


class UserSchedule(BaseModel):
    name: str = Field(..., min_length=1, description="Unique schedule owner name")
    tasks: Dict[str, List[str]] = Field(default_factory=dict, description="Day key -> ordered tasks")

    def day_tasks(self, day: int) -> List[str]:
        return list(self.tasks.get(str(day), []))


class UpdateTasksRequest(BaseModel):
    name: Optional[str] = Field(None, description="Schedule owner; required and non-empty")
    tasks: Optional[Dict[str, List[str]]] = Field(None, description="Replaces the whole mapping when present")


class UpdateDayTasksRequest(BaseModel):
    tasks: Optional[List[str]] = Field(None, description="Replaces a single day's list")
