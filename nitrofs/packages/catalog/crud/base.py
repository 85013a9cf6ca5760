"""CRUD 基类：为各实体提供通用的数据访问方法。"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from nitrofs.packages.catalog.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """封装常见的查询、创建与删除逻辑，事务边界由调用方（服务层）控制。"""

    def __init__(self, model: Type[ModelType]):
        self.model = model
        self.pk = self.model.__mapper__.primary_key[0]

    def query(self, db: Session) -> Query:
        return db.query(self.model)

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.get(self.model, id)

    def create(self, db: Session, obj_in: Dict[str, Any]) -> ModelType:
        """写入一行并 flush，使数据库生成的主键与默认值可用；提交由调用方负责。"""
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        db.flush()
        db.refresh(db_obj)
        return db_obj

    def delete_by_id(self, db: Session, id: Any) -> int:
        """按主键物理删除，返回受影响的行数。"""
        return self.query(db).filter(self.pk == id).delete(synchronize_session=False)
