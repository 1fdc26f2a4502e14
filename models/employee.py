# models/employee.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class EmployeeOut(BaseModel):
    id: str
    name: str
    created_at: Optional[datetime] = None
    last_upload_at: Optional[datetime] = None

class EmployeeListOut(BaseModel):
    employees: List[EmployeeOut]
    total: int
