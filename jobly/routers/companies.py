from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from jobly.database import get_db
from jobly.dependencies import CompanyFilterParams
from jobly.schemas import CompanyCreate, CompanyResponse, CompanyUpdate
from jobly.services import company_service

router = APIRouter(prefix="/api/v1/companies", tags=["companies"])

@router.get("", response_model=list[CompanyResponse])
async def list_companies(
    params: CompanyFilterParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.get_companies(db, params.filters)

@router.get("/{handle}", response_model=CompanyResponse)
async def get_company(handle: str, db: AsyncSession = Depends(get_db)):
    return await company_service.get_company(db, handle)

@router.post("", status_code=201, response_model=CompanyResponse)
async def create_company(data: CompanyCreate, db: AsyncSession = Depends(get_db)):
    return await company_service.create_company(db, data.model_dump(by_alias=True))

@router.patch("/{handle}", response_model=CompanyResponse)
async def update_company(handle: str, data: CompanyUpdate, db: AsyncSession = Depends(get_db)):
    return await company_service.update_company(
        db, handle, data.model_dump(exclude_unset=True, by_alias=True)
    )

@router.delete("/{handle}", status_code=204)
async def delete_company(handle: str, db: AsyncSession = Depends(get_db)):
    await company_service.delete_company(db, handle)
