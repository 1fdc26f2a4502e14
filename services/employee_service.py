# services/employee_service.py

import logging
import re
from database import get_employee_collection
from fastapi import HTTPException
from pymongo import ReturnDocument
from datetime import datetime
from typing import Optional
from utils.query_utils import clean_nan_values

logger = logging.getLogger(__name__)

def serialize_employee(employee):
    employee = dict(employee)
    employee["id"] = str(employee.pop("_id"))
    return clean_nan_values(employee)

async def upsert_employee(name: str):
    """Find the employee by name, creating it on first upload."""
    now = datetime.now()
    employee = await get_employee_collection().find_one_and_update(
        {"name": name},
        {
            "$setOnInsert": {"created_at": now},
            "$set": {"last_upload_at": now},
        },
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    logger.debug("Employee %r resolved to %s", name, employee["_id"])
    return employee

async def get_employee_by_name(name: str):
    employee = await get_employee_collection().find_one({"name": name})
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee

async def get_employees(skip: int = 0, limit: int = 100, name_contains: Optional[str] = None):
    query = {}
    if name_contains:
        query["name"] = {"$regex": re.escape(name_contains), "$options": "i"}

    cursor = get_employee_collection().find(query).sort("name", 1).skip(skip).limit(limit)
    employees = await cursor.to_list(length=limit)

    # Get total count for pagination
    total_count = await get_employee_collection().count_documents(query)

    return {"employees": [serialize_employee(e) for e in employees], "total": total_count}

async def get_employee(name: str):
    return serialize_employee(await get_employee_by_name(name))
