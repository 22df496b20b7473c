"""
Student record API routes - CRUD over the record store.

Provides endpoints for:
- Listing all students
- Fetching, updating and deleting one student by id
- Creating a student from a partial record
"""

import time
from fastapi import APIRouter, Depends

from student_records.database import get_store
from student_records.models.student import StudentPatch
from student_records.services.record_store import RecordStore
from student_records.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


@router.get("/records")
async def list_students(store: RecordStore = Depends(get_store)):
    """List every student in insertion order."""
    start_time = time.time()
    students = await store.list()

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO", "Listed {} students".format(len(students)),
                     extra_data={"duration_ms": round(duration_ms, 2)})
    return students


@router.get("/records/{student_id}")
async def get_student(student_id: int, store: RecordStore = Depends(get_store)):
    return await store.get(student_id)


@router.post("/records", status_code=201)
async def create_student(request: StudentPatch, store: RecordStore = Depends(get_store)):
    """Create a student; the id is always assigned by the store."""
    return await store.create(request.fields_set())


@router.put("/records/{student_id}")
async def update_student(student_id: int, request: StudentPatch,
                         store: RecordStore = Depends(get_store)):
    """Merge the supplied fields onto the student; omitted fields keep their values."""
    return await store.update(student_id, request.fields_set())


@router.delete("/records/{student_id}")
async def delete_student(student_id: int, store: RecordStore = Depends(get_store)):
    return await store.delete(student_id)
