from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from jobly.database import get_db
from jobly.dependencies import JobFilterParams
from jobly.schemas import JobCreate, JobResponse, JobUpdate
from jobly.services import job_service

router = APIRouter(prefix="/api/v1/jobs", tags=["jobs"])

@router.get("", response_model=list[JobResponse])
async def list_jobs(
    params: JobFilterParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.get_jobs(db, params.filters)

@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: int, db: AsyncSession = Depends(get_db)):
    return await job_service.get_job(db, job_id)

@router.post("", status_code=201, response_model=JobResponse)
async def create_job(data: JobCreate, db: AsyncSession = Depends(get_db)):
    return await job_service.create_job(db, data.model_dump(by_alias=True))

@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(job_id: int, data: JobUpdate, db: AsyncSession = Depends(get_db)):
    return await job_service.update_job(
        db, job_id, data.model_dump(exclude_unset=True, by_alias=True)
    )

@router.delete("/{job_id}", status_code=204)
async def delete_job(job_id: int, db: AsyncSession = Depends(get_db)):
    await job_service.delete_job(db, job_id)
