# routers/employee_router.py
from fastapi import APIRouter
from services.employee_service import get_employees, get_employee
from models.employee import EmployeeListOut, EmployeeOut
from typing import Optional

router = APIRouter()

@router.get("/employees", response_model=EmployeeListOut)
async def api_get_employees(
    skip: int = 0,
    limit: int = 100,
    name_contains: Optional[str] = None
):
    return await get_employees(skip, limit, name_contains)

@router.get("/employees/{employee_name}", response_model=EmployeeOut)
async def api_get_employee(employee_name: str):
    return await get_employee(employee_name)
