# database.py
from motor.motor_asyncio import AsyncIOMotorClient
import config

client = AsyncIOMotorClient(config.MONGODB_URI or "mongodb://localhost:27017")
db = client[config.MONGODB_DB]

def get_employee_collection():
    return db["employees"]

def get_attendance_collection():
    return db["attendance"]

async def create_indexes():
    await get_employee_collection().create_index("name", unique=True)
    await get_attendance_collection().create_index(
        [("employee_id", 1), ("date", 1)], unique=True
    )
