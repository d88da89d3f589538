"""/v1/categories - category endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from paycycle.api.v1.schemas import CategoryRequest, CategoryResponse
from paycycle.infrastructure.database.session import get_db
from paycycle.infrastructure.database.repositories import CategoryRepository

router = APIRouter()


@router.post("/categories", response_model=CategoryResponse, status_code=201)
def create_category(request_body: CategoryRequest, db: Session = Depends(get_db)):
    db_category = CategoryRepository(db).create_category(request_body.name, request_body.type)
    db.commit()
    return CategoryResponse(id=str(db_category.id), name=db_category.name, type=db_category.type)


@router.get("/categories", response_model=list[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    return [
        CategoryResponse(id=str(c.id), name=c.name, type=c.type)
        for c in CategoryRepository(db).list_categories()
    ]
